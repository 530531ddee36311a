"""Account name extraction from domain-qualified login names."""


def get_user_name_part(user_name: str) -> str:
    """Strip a domain qualifier from a login name.

    ``user@example.com`` and ``EXAMPLE\\user`` both become ``user``. Names with
    more than one backslash are returned unchanged.
    """
    if "@" in user_name:
        return user_name.split("@", 1)[0]

    parts = user_name.split("\\")
    return parts[1] if len(parts) == 2 else user_name
