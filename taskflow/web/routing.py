# taskflow/web/routing.py
# Route table and auth guards for the single-page frontend.
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, MutableMapping, Optional

ADMIN_DASHBOARD = "/admin/dashboard"
USER_DASHBOARD = "/user/dashboard"
LOGIN_PATH = "/login"
ROOT_PATH = "/"

class Guard(str, Enum):
    PUBLIC_ONLY = "public-only"
    PROTECTED = "protected"
    DASHBOARD_PREVIEW = "dashboard-preview"
    ROOT = "root"

class Outcome(str, Enum):
    RENDER = "render"
    REDIRECT = "redirect"
    PREVIEW = "preview"
    LOADING = "loading"

@dataclass(frozen=True)
class Route:
    path: str
    page: Optional[str]
    guard: Guard
    required_role: Optional[str] = None

@dataclass(frozen=True)
class Resolution:
    outcome: Outcome
    page: Optional[str] = None
    redirect_to: Optional[str] = None
    # Path the user was heading for when bounced to the login page.
    from_path: Optional[str] = None
    show_navbar: bool = False

@dataclass
class AuthContext:
    """
    What the frontend knows about the session: the user object held in
    context plus browser local storage. The two are read independently and
    nothing keeps them in sync.
    """
    user: Optional[Mapping[str, Any]] = None
    storage: MutableMapping[str, str] = field(default_factory=dict)
    loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user) or bool(self.storage.get("token"))

    def has_role(self, role: str) -> bool:
        return bool(self.user) and self.user.get("role") == role

    def dashboard_path(self) -> str:
        # Uses the stored role, not the context user.
        return ADMIN_DASHBOARD if self.storage.get("userRole") == "admin" else USER_DASHBOARD

ROUTES: List[Route] = [
    Route(ROOT_PATH, None, Guard.ROOT),
    Route(LOGIN_PATH, "Login", Guard.PUBLIC_ONLY),
    Route("/signup", "Signup", Guard.PUBLIC_ONLY),
    Route("/forgot-password", "ForgotPassword", Guard.PUBLIC_ONLY),
    Route("/reset-password", "ResetPassword", Guard.PUBLIC_ONLY),
    Route("/dashboard", "Dashboard", Guard.DASHBOARD_PREVIEW),
    Route("/landing", "Landing", Guard.PROTECTED),
    Route(ADMIN_DASHBOARD, "AdminDashboard", Guard.PROTECTED, "admin"),
    Route("/admin/users", "Users", Guard.PROTECTED, "admin"),
    Route("/admin/manage-users", "ManageUsers", Guard.PROTECTED, "admin"),
    Route("/admin/manage-tasks", "ManageTasks", Guard.PROTECTED, "admin"),
    Route("/admin/settings", "Settings", Guard.PROTECTED, "admin"),
    Route("/admin/user-logs", "UserLogPage", Guard.PROTECTED, "admin"),
    Route("/admin/task-filter", "TaskFilter", Guard.PROTECTED, "admin"),
    Route("/admin/logs", "AdminUserLogs", Guard.PROTECTED),
    Route(USER_DASHBOARD, "UserDashboard", Guard.PROTECTED),
    Route("/user/userpage", "UserPage", Guard.PROTECTED),
    Route("/user/notifications", "NotificationsPage", Guard.PROTECTED),
    Route("/user/calendar", "CalendarPage", Guard.PROTECTED),
    Route("/user/profile", "ProfilePage", Guard.PROTECTED),
    Route("/user/task-filter", "TaskFilter", Guard.PROTECTED),
]

def find_route(path: str, routes: List[Route] = ROUTES) -> Optional[Route]:
    normalized = path.rstrip("/") or ROOT_PATH
    for route in routes:
        if route.path == normalized:
            return route
    return None

def guard_public_only(route: Route, ctx: AuthContext) -> Resolution:
    if ctx.is_authenticated:
        return Resolution(Outcome.REDIRECT, redirect_to=ctx.dashboard_path())
    return Resolution(Outcome.RENDER, page=route.page)

def guard_protected(route: Route, ctx: AuthContext, path: str) -> Resolution:
    if not ctx.is_authenticated:
        return Resolution(Outcome.REDIRECT, redirect_to=LOGIN_PATH, from_path=path)
    if route.required_role and not ctx.has_role(route.required_role):
        return Resolution(Outcome.REDIRECT, redirect_to=ctx.dashboard_path())
    return Resolution(Outcome.RENDER, page=route.page, show_navbar=True)

def guard_dashboard_preview(route: Route, ctx: AuthContext) -> Resolution:
    if not ctx.is_authenticated:
        return Resolution(Outcome.PREVIEW, page=route.page)
    return Resolution(Outcome.REDIRECT, redirect_to=ctx.dashboard_path())

def resolve(path: str, ctx: AuthContext, routes: List[Route] = ROUTES) -> Resolution:
    """Decides what the router does for ``path`` given the current auth state."""
    if ctx.loading:
        return Resolution(Outcome.LOADING)

    route = find_route(path, routes)
    if route is None:
        return Resolution(Outcome.REDIRECT, redirect_to=ROOT_PATH)

    if route.guard is Guard.ROOT:
        target = ctx.dashboard_path() if ctx.is_authenticated else LOGIN_PATH
        return Resolution(Outcome.REDIRECT, redirect_to=target)
    if route.guard is Guard.PUBLIC_ONLY:
        return guard_public_only(route, ctx)
    if route.guard is Guard.DASHBOARD_PREVIEW:
        return guard_dashboard_preview(route, ctx)
    return guard_protected(route, ctx, path)
