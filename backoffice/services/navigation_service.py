"""
Sidebar navigation filtered by the caller's permissions
"""
from typing import Dict, List, Optional

from backoffice.constants import NAVIGATION_MENU
from backoffice.services.authorization_session import AuthorizationSession


def visible_menu(session: AuthorizationSession) -> List[Dict[str, Optional[str]]]:
    """Menu entries the session may see; entries without a feature are always shown."""
    return [
        {"title": title, "url": url, "feature_code": code}
        for code, title, url in NAVIGATION_MENU
        if code is None or session.has_permission(code)
    ]
