"""Defaults for authorization resolution. Environment variables override these in create_app()."""

# Upper bound (seconds) for profile + permission + scope resolution of one session.
DEFAULT_RESOLUTION_TIMEOUT = 5.0

# Where a denied route transition sends the caller.
DEFAULT_DENIED_REDIRECT = '/'

DENIED_NOTICE = 'You do not have permission to access this page'

# Resolver pool size: permission and scope resolution run side by side.
RESOLVER_WORKERS = 2

# Used when the configured redirect is itself a gated route the caller cannot open.
# Never listed in ROUTE_PERMISSIONS.
FORBIDDEN_LANDING = '/forbidden'
