"""Network settings accessors."""

from __future__ import annotations

from ilo_cli.ilo_client import IloClientProtocol
from ilo_cli.models.network import NetworkSettings, NetworkUpdate
from ilo_cli.protocol.nodes import DecodedNode
from ilo_cli.services.projection import coerce_flag, coerce_str, require_node


class NetworkService:
    def __init__(self, client: IloClientProtocol):
        self._client = client

    def get_settings(self) -> NetworkSettings:
        node = require_node(self._client.fetch("network"), "GET_NETWORK_SETTINGS")
        return self._parse_settings(node)

    def update_settings(self, update: NetworkUpdate) -> None:
        self._client.fetch("set_network", update.as_params())

    @staticmethod
    def _parse_settings(node: DecodedNode) -> NetworkSettings:
        values = node.child_values()
        return NetworkSettings(
            enable_nic=coerce_flag(values.get("ENABLE_NIC"), default=True),
            dhcp_enable=coerce_flag(values.get("DHCP_ENABLE")),
            speed_autoselect=coerce_flag(values.get("SPEED_AUTOSELECT"), default=True),
            ip_address=coerce_str(values.get("IP_ADDRESS")),
            subnet_mask=coerce_str(values.get("SUBNET_MASK")),
            gateway_ip_address=coerce_str(values.get("GATEWAY_IP_ADDRESS")),
            dns_name=coerce_str(values.get("DNS_NAME")),
            domain_name=coerce_str(values.get("DOMAIN_NAME")),
            prim_dns_server=coerce_str(values.get("PRIM_DNS_SERVER")),
            mac_address=coerce_str(values.get("MAC_ADDRESS")),
        )
