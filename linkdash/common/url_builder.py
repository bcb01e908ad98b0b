"""Public short URL construction."""


def build_short_url(short_code: str, base_url: str, path_prefix: str = "") -> str:
    """Return the address a visitor follows to reach a link's target.

    ``base_url`` is the public origin resolved for the request (forwarded
    headers or the configured fallback) and ``path_prefix`` is the mount
    point of the redirect route, e.g. ``/s`` gives ``https://sho.rt/s/abc1234``.
    """
    segments = [base_url.rstrip("/")]
    prefix = path_prefix.strip("/")
    if prefix:
        segments.append(prefix)
    segments.append(short_code)
    return "/".join(segments)
