import base64

from content_relay.config import Settings, UpstreamCredential, load_settings, parse_host_list


def test_load_settings_reads_environment_mapping() -> None:
    settings = load_settings(
        {
            "WORDPRESS_GRAPHQL_URL": "https://cms.example.test/graphql",
            "WP_APP_USERNAME": "editor",
            "WP_APP_PASSWORD": "abcd efgh ijkl",
            "GRAPHQL_TIMEOUT_SECONDS": "12.5",
            "IMAGE_ALLOWED_HOSTS": "Cdn.Example.com, vacaylanka.atwebpages.com ,",
            "IMAGE_PROXY_PATH": "/media/proxy/",
            "PORT": "9000",
            "LOG_JSON": "false",
        }
    )

    assert settings.graphql_url == "https://cms.example.test/graphql"
    assert settings.graphql_timeout_s == 12.5
    assert settings.image_allowed_hosts == frozenset({"cdn.example.com", "vacaylanka.atwebpages.com"})
    assert settings.image_proxy_path == "/media/proxy"
    assert settings.port == 9000
    assert settings.log_json is False
    assert settings.graphql_configured


def test_defaults_when_environment_is_empty() -> None:
    settings = load_settings({})

    assert settings.graphql_timeout_s == 30.0
    assert settings.image_allowed_hosts == frozenset({"vacaylanka.atwebpages.com"})
    assert settings.image_origin_scheme == "http"
    assert settings.image_proxy_path == "/api/image-proxy"
    assert settings.missing_graphql_settings() == ["graphql_url", "graphql_username", "graphql_password"]
    assert settings.graphql_credential is None


def test_public_graphql_url_is_used_as_fallback() -> None:
    settings = load_settings({"NEXT_PUBLIC_WORDPRESS_GRAPHQL_URL": "https://cms.example.test/graphql"})

    assert settings.graphql_url == "https://cms.example.test/graphql"
    assert settings.missing_graphql_settings() == ["graphql_username", "graphql_password"]


def test_password_is_hidden_from_repr() -> None:
    settings = Settings(graphql_url="https://x.test/graphql", graphql_username="editor", graphql_password="hunter2")

    assert "hunter2" not in repr(settings)
    assert "hunter2" not in repr(settings.graphql_credential)


def test_basic_auth_header() -> None:
    credential = UpstreamCredential("editor", "abcd efgh")

    assert credential.basic_auth_header() == "Basic " + base64.b64encode(b"editor:abcd efgh").decode()


def test_parse_host_list_skips_blanks() -> None:
    assert parse_host_list(" a.com,,B.com ") == frozenset({"a.com", "b.com"})
    assert parse_host_list("") == frozenset()
