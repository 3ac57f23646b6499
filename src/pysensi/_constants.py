"""Internal constants shared across the library."""

BASE_URL = "https://bus-serv.sensicomfort.com"
ACCEPT_HEADER = "application/json; version=1, */*; q=0.01"

# ------------------------------------------------------------------
# Realtime (SignalR long polling) channel
# ------------------------------------------------------------------

HUB_NAME = "thermostat-v1"
TRANSPORT = "longPolling"
CONNECTION_DATA = '[{"name": "thermostat-v1"}]'

#: Upper bound (inclusive) of the random ``tid`` query parameter, as SignalR does.
TID_MAX = 10

# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

AUTHORIZE_ENDPOINT = "/api/authorize"
THERMOSTATS_ENDPOINT = "/api/thermostats"
NEGOTIATE_ENDPOINT = "/realtime/negotiate"
CONNECT_ENDPOINT = "/realtime/connect"
SEND_ENDPOINT = "/realtime/send"
POLL_ENDPOINT = "/realtime/poll"
ABORT_ENDPOINT = "/realtime/abort"

#: Poll status codes that mean the authorization cookie is no longer valid.
AUTHORIZATION_REQUIRED_STATUSES: frozenset[int] = frozenset({401, 403})
#: Poll status code the service returns once the hub subscription lapsed.
SUBSCRIPTION_EXPIRED_STATUS = 500

TEMPORARY_HOLD = "Temporary"
