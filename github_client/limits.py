'''
limits for github-api

stolen from: https://github.com/dead-claudia/github-limits

limits refer to amount of codepoints (tested empirically for some samples).
'''

release_body = 125000


def fits(
    value: str | bytes,
    /,
    limit: int,
) -> bool:
    return len(value) <= limit
