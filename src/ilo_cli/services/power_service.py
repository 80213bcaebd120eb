"""Power and UID light accessors."""

from __future__ import annotations

from ilo_cli.ilo_client import IloClientProtocol
from ilo_cli.models.system import PowerAction, PowerState
from ilo_cli.services.projection import coerce_state, require_node


class PowerService:
    """Volatile server state; every read goes to the processor."""

    def __init__(self, client: IloClientProtocol):
        self._client = client

    def power_status(self) -> PowerState:
        node = require_node(self._client.fetch("power_status"), "GET_HOST_POWER")
        return self._coerce_power_state(node.get("HOST_POWER", node.get("POWER")))

    def set_power(self, action: PowerAction) -> None:
        self._client.fetch("set_power", {"state": action})

    def uid_status(self) -> PowerState:
        node = require_node(self._client.fetch("uid_status"), "GET_UID_STATUS")
        return self._coerce_power_state(node.get("UID"))

    def set_uid(self, state: PowerState) -> None:
        self._client.fetch("set_uid", {"state": state})

    @staticmethod
    def _coerce_power_state(value: str | None) -> PowerState:
        return "on" if coerce_state(value) in {"on", "yes", "y"} else "off"
