# oxibridge/app/factory.py
from __future__ import annotations

import functools
import logging
from typing import Mapping, Optional, Type

from oxibridge.app.config import VARIANT_MOCK, VARIANT_NATIVE, BridgeConfig
from oxibridge.bridge.mock import MockDeviceBridge
from oxibridge.bridge.native import DeviceBridge
from oxibridge.core.errors import ConfigError
from oxibridge.interfaces.bridge import Bridge
from oxibridge.interfaces.native_invoker import NativeInvoker
from oxibridge.native.host import BluetoothHost, StaticBluetoothHost
from oxibridge.native.plugin import NoninPlugin, TransportFactory
from oxibridge.transport.base import Transport
from oxibridge.transport.serial_port import SerialTransport

# native.transport.driver -> transport class (keys lower-case)
TRANSPORT_DRIVERS: Mapping[str, Type[Transport]] = {
    "serial": SerialTransport,
}


def transport_factory(
    driver: str,
    params: Mapping[str, object],
    *,
    drivers: Mapping[str, Type[Transport]] = TRANSPORT_DRIVERS,
) -> TransportFactory:
    """Bind a driver and its settings into a port -> Transport callable."""
    transport_cls = drivers.get(driver.lower())
    if transport_cls is None:
        raise ConfigError(
            f"Unknown transport driver '{driver}'.",
            hint=f"Known drivers: {', '.join(sorted(drivers))}",
            details={"driver": driver},
        )
    return functools.partial(transport_cls, **dict(params))


def create_invoker(
    config: BridgeConfig,
    *,
    host: Optional[BluetoothHost] = None,
    drivers: Mapping[str, Type[Transport]] = TRANSPORT_DRIVERS,
    logger: Optional[logging.Logger] = None,
) -> NativeInvoker:
    """
    Build the native-side plugin for the configured devices.

    `host` and `drivers` are injectable for tests and for platforms that
    provide their own Bluetooth services.
    """
    native = config.native
    factory = transport_factory(native.transport_driver, native.transport_params, drivers=drivers)
    host = host or StaticBluetoothHost(native.devices, adapter_enabled=native.adapter_enabled)
    return NoninPlugin(
        host,
        service=native.service,
        transport_factory=factory,
        data_mode=native.data_mode,
        logger=logger,
    )


def create_bridge(
    config: BridgeConfig,
    *,
    invoker: Optional[NativeInvoker] = None,
    logger: Optional[logging.Logger] = None,
) -> Bridge:
    """Select the bridge implementation at startup from config."""
    log = logger or logging.getLogger(__name__)

    if config.variant == VARIANT_MOCK:
        log.info("BRIDGE_SELECTED variant=mock")
        return MockDeviceBridge(logger=log)

    if config.variant == VARIANT_NATIVE:
        invoker = invoker or create_invoker(config, logger=log)
        log.info("BRIDGE_SELECTED variant=native service=%s", config.native.service)
        return DeviceBridge(invoker, service=config.native.service, logger=log)

    raise ConfigError(
        f"Unknown bridge variant '{config.variant}'.",
        details={"variant": config.variant},
    )
