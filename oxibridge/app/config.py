# oxibridge/app/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from oxibridge.core.errors import ConfigError
from oxibridge.native.host import is_valid_address, normalize_address
from oxibridge.protocol.commands import DataMode

VARIANT_MOCK = "mock"
VARIANT_NATIVE = "native"
VARIANTS = (VARIANT_MOCK, VARIANT_NATIVE)


@dataclass(frozen=True)
class NativeConfig:
    service: str = "Nonin"
    data_mode: DataMode = DataMode.D7
    adapter_enabled: bool = True
    transport_driver: str = "serial"
    transport_params: Dict[str, Any] = field(default_factory=dict)
    devices: Dict[str, str] = field(default_factory=dict)  # address -> port


@dataclass(frozen=True)
class BridgeConfig:
    variant: str = VARIANT_MOCK
    native: NativeConfig = field(default_factory=NativeConfig)


class ConfigLoader:
    """
    Loads the bridge configuration from a YAML file into BridgeConfig.

    Layout:
        bridge:
          variant: mock | native
        native:
          service: Nonin
          data_mode: D7
          adapter_enabled: true
          transport: {driver: serial, baudrate: 9600, timeout: 0.1}
          devices: {"00:1C:05:FF:4E:9A": /dev/rfcomm0}
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load_yaml(self) -> dict:
        if not self.path.exists():
            raise ConfigError(
                f"Config file not found: {self.path}",
                hint="Pass --config with an existing file, or omit it to use the mock bridge.",
                details={"path": str(self.path)},
            )
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(
                "Config file is not valid YAML.",
                hint=str(e),
                details={"path": str(self.path)},
            ) from None
        if not isinstance(data, dict):
            raise ConfigError(
                "Config root must be a mapping.",
                details={"path": str(self.path)},
            )
        return data

    def load(self) -> BridgeConfig:
        data = self._load_yaml()
        bridge = self._section(data, "bridge")
        variant = str(bridge.get("variant", VARIANT_MOCK)).strip().lower()
        if variant not in VARIANTS:
            raise ConfigError(
                f"Unknown bridge variant '{variant}'.",
                hint=f"Valid variants: {', '.join(VARIANTS)}",
                details={"path": str(self.path), "variant": variant},
            )
        return BridgeConfig(variant=variant, native=self._native(self._section(data, "native")))

    # ---------------------------------------------------------------------
    # Sections
    # ---------------------------------------------------------------------
    def _section(self, data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigError(
                f"'{name}' section must be a mapping.",
                details={"path": str(self.path), "section": name},
            )
        return section

    def _native(self, raw: Mapping[str, Any]) -> NativeConfig:
        defaults = NativeConfig()

        try:
            data_mode = DataMode.parse(raw.get("data_mode", defaults.data_mode.name))
        except ValueError as e:
            raise ConfigError(
                "Invalid native.data_mode.",
                hint=str(e),
                details={"path": str(self.path)},
            ) from None

        adapter_enabled = raw.get("adapter_enabled", defaults.adapter_enabled)
        if not isinstance(adapter_enabled, bool):
            raise ConfigError(
                "native.adapter_enabled must be true or false.",
                hint="Use an unquoted YAML boolean.",
                details={"path": str(self.path), "value": adapter_enabled},
            )

        transport = dict(self._section(raw, "transport"))
        driver = str(transport.pop("driver", defaults.transport_driver))
        if "port" in transport:
            raise ConfigError(
                "native.transport must not set 'port'.",
                hint="Ports are per device; list them under native.devices.",
                details={"path": str(self.path)},
            )
        self._check_transport_params(transport)

        return NativeConfig(
            service=str(raw.get("service", defaults.service)),
            data_mode=data_mode,
            adapter_enabled=adapter_enabled,
            transport_driver=driver,
            transport_params=transport,
            devices=self._devices(raw.get("devices") or {}),
        )

    def _check_transport_params(self, params: Mapping[str, Any]) -> None:
        baudrate = params.get("baudrate", 9600)
        if isinstance(baudrate, bool) or not isinstance(baudrate, int) or baudrate <= 0:
            raise ConfigError(
                f"Invalid native.transport.baudrate {baudrate!r}.",
                hint="Use a positive integer such as 9600.",
                details={"path": str(self.path), "baudrate": baudrate},
            )
        if "timeout" in params:
            timeout = params["timeout"]
            if timeout is not None and (
                isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout < 0
            ):
                raise ConfigError(
                    f"Invalid native.transport.timeout {timeout!r}.",
                    hint="Use seconds as a non-negative number, or null to block.",
                    details={"path": str(self.path), "timeout": timeout},
                )

    def _devices(self, raw: Any) -> Dict[str, str]:
        if not isinstance(raw, dict):
            raise ConfigError(
                "native.devices must map device address -> serial port.",
                details={"path": str(self.path)},
            )
        devices: Dict[str, str] = {}
        for address, port in raw.items():
            if not is_valid_address(address):
                raise ConfigError(
                    f"Invalid device address '{address}'.",
                    hint="Quote it in YAML and use the XX:XX:XX:XX:XX:XX form.",
                    details={"path": str(self.path), "address": address},
                )
            if not port or not isinstance(port, str):
                raise ConfigError(
                    f"Device '{address}' needs a serial port path.",
                    details={"path": str(self.path), "address": address},
                )
            devices[normalize_address(address)] = port
        return devices


def load_config(path: Optional[str | Path] = None) -> BridgeConfig:
    """Load config from path; no path means defaults (mock bridge)."""
    if path is None:
        return BridgeConfig()
    return ConfigLoader(path).load()
