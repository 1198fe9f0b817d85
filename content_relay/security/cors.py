GRAPHQL_CORS_POLICY: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}

IMAGE_CORS_POLICY: dict[str, str] = {"Access-Control-Allow-Origin": "*"}


def graphql_cors_headers() -> dict[str, str]:
    return dict(GRAPHQL_CORS_POLICY)
