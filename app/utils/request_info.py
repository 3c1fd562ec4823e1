from fastapi import Request


def client_ip(request: Request) -> str | None:
    # Behind a proxy the first forwarded hop is the real client
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host
    return None


def client_browser(request: Request) -> str:
    return request.headers.get("user-agent") or "Unknown"
