from __future__ import annotations

import pytest

from oxibridge.protocol.frame import NoninFrame, PulseQuality, is_sync_frame, is_valid_frame


def test_valid_frame_requires_bit7_and_checksum(frame_bytes):
    raw = frame_bytes(0x80, pleth=0x1234, extra=0x42)
    assert is_valid_frame(raw)

    no_bit7 = bytes([0x00]) + raw[1:4] + bytes([sum(raw[1:4]) & 0xFF])
    assert not is_valid_frame(no_bit7)

    bad_sum = raw[:4] + bytes([(raw[4] + 1) & 0xFF])
    assert not is_valid_frame(bad_sum)


def test_checksum_wraps_mod_256():
    raw = bytes([0xFF, 0xFF, 0xFF, 0xFF, (0xFF * 4) & 0xFF])
    assert is_valid_frame(raw)


def test_short_window_is_not_a_frame():
    assert not is_valid_frame(b"\x81\x00\x00")


def test_sync_bit(frame_bytes):
    assert is_sync_frame(frame_bytes(0x81))
    assert not is_sync_frame(frame_bytes(0x80))


def test_from_bytes_decodes_fields(frame_bytes):
    f = NoninFrame.from_bytes(frame_bytes(0x81, pleth=0xABCD, extra=0x5A))

    assert f.status == 0x81
    assert f.pleth == 0xABCD
    assert f.extra == 0x5A
    assert f.is_sync


def test_from_bytes_too_short_raises():
    with pytest.raises(ValueError):
        NoninFrame.from_bytes(b"\x80\x00")


@pytest.mark.parametrize(
    "status, artifact, oot, alarm",
    [
        (0x80, False, False, False),
        (0xA0, True, False, False),
        (0x90, False, True, False),
        (0x88, False, False, True),
        (0xB8, True, True, True),
    ],
)
def test_status_flags(status, artifact, oot, alarm):
    f = NoninFrame(status=status, pleth=0, extra=0)
    assert f.has_artifact is artifact
    assert f.is_out_of_track is oot
    assert f.has_sensor_alarm is alarm


@pytest.mark.parametrize(
    "status, quality",
    [
        (0x80, PulseQuality.OUTSIDE_PULSE),
        (0x84, PulseQuality.RED),
        (0x82, PulseQuality.GREEN),
        (0x86, PulseQuality.YELLOW),
    ],
)
def test_pulse_quality(status, quality):
    assert NoninFrame(status=status, pleth=0, extra=0).pulse_quality is quality
