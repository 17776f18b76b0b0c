"""Browser session kept in a local dcc.Store: {"user": {...} | None, "token": str | None}."""


def empty_session():
    return {"user": None, "token": None}


def start_session(user, token):
    return {"user": user or {}, "token": token}


def is_logged_in(session):
    return bool(session and session.get("user"))


def token_of(session):
    return (session or {}).get("token")


def display_name(user):
    user = user or {}
    return user.get("name") or user.get("username") or user.get("email") or "Guest"


def first_name(user):
    return display_name(user).split(" ")[0]


def session_from_signin(data):
    """Build a session from a sign-in response; None when it carries no user."""
    user = data.get("user")
    if not user:
        return None
    return start_session(user, data.get("access_token") or data.get("token"))
