from __future__ import annotations

import pytest

from oxibridge.app.config import VARIANT_MOCK, VARIANT_NATIVE, BridgeConfig, load_config
from oxibridge.core.errors import ConfigError
from oxibridge.protocol.commands import DataMode


def _write(tmp_path, text: str):
    p = tmp_path / "bridge.yml"
    p.write_text(text, encoding="utf-8")
    return p


def test_no_path_means_mock_defaults():
    cfg = load_config(None)
    assert cfg == BridgeConfig()
    assert cfg.variant == VARIANT_MOCK


def test_full_native_config(tmp_path):
    p = _write(
        tmp_path,
        """
bridge:
  variant: Native
native:
  service: Nonin
  data_mode: d8
  adapter_enabled: false
  transport:
    driver: serial
    baudrate: 19200
    timeout: 0.2
  devices:
    "00:1c:05:ff:4e:9a": /dev/rfcomm0
""",
    )
    cfg = load_config(p)

    assert cfg.variant == VARIANT_NATIVE
    assert cfg.native.data_mode is DataMode.D8
    assert cfg.native.adapter_enabled is False
    assert cfg.native.transport_driver == "serial"
    assert cfg.native.transport_params == {"baudrate": 19200, "timeout": 0.2}
    assert cfg.native.devices == {"00:1C:05:FF:4E:9A": "/dev/rfcomm0"}


def test_empty_file_uses_defaults(tmp_path):
    assert load_config(_write(tmp_path, "")) == BridgeConfig()


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError) as ei:
        load_config(tmp_path / "nope.yml")
    assert ei.value.code == "config_error"
    assert ei.value.hint


@pytest.mark.parametrize(
    "text, fragment",
    [
        ("bridge: [1, 2", "YAML"),
        ("- a\n- b\n", "mapping"),
        ("bridge: 3\n", "'bridge'"),
        ("bridge:\n  variant: cordova\n", "variant"),
        ("native:\n  data_mode: D99\n", "data_mode"),
        ("native:\n  transport:\n    port: /dev/ttyS0\n", "port"),
        ("native:\n  transport:\n    baudrate: -1\n", "baudrate"),
        ("native:\n  transport:\n    baudrate: fast\n", "baudrate"),
        ("native:\n  transport:\n    timeout: soon\n", "timeout"),
        ("native:\n  transport:\n    timeout: -0.5\n", "timeout"),
        ("native:\n  adapter_enabled: \"false\"\n", "adapter_enabled"),
        ("native:\n  devices: [a, b]\n", "devices"),
        ('native:\n  devices:\n    "not-a-mac": /dev/rfcomm0\n', "address"),
        ('native:\n  devices:\n    "AA:BB:CC:DD:EE:FF": ""\n', "port"),
    ],
)
def test_invalid_configs(tmp_path, text, fragment):
    with pytest.raises(ConfigError) as ei:
        load_config(_write(tmp_path, text))
    assert fragment in ei.value.message


def test_null_timeout_is_accepted(tmp_path):
    cfg = load_config(_write(tmp_path, "native:\n  transport:\n    timeout: null\n"))
    assert cfg.native.transport_params == {"timeout": None}
