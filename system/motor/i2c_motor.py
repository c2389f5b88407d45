# system/motor/i2c_motor.py
import time

import smbus2

from system.log_utils import debug, info
from washer.errors import DriverUnavailable
from washer.types import Direction, check_speed

# PCA9685 registers
MODE1       = 0x00
PRESCALE    = 0xFE
LED0_ON_L   = 0x06
MODE1_SLEEP = 0x10
MODE1_RESTART = 0x80

OSC_HZ      = 25_000_000
PWM_FREQ_HZ = 50
SPEED_SCALE = 16                # 0..255 -> 0..4080 of 4096 ticks


class I2CMotorDriver:
    """
    DC motor on a PCA9685 based driver board (two PWM channels per motor).

    Safety:
      - Never drives both channels of the motor at the same time.
    """

    def __init__(self, port, address, cw_channel, ccw_channel, *, freq_hz=PWM_FREQ_HZ):
        self.port = port
        self.address = address
        self.cw_channel = cw_channel
        self.ccw_channel = ccw_channel
        try:
            self.bus = smbus2.SMBus(port)
        except OSError as e:
            raise DriverUnavailable(f"i2c-{port} not available: {e}") from e
        try:
            self._set_freq(freq_hz)
        except OSError as e:
            self.bus.close()
            raise DriverUnavailable(f"motor driver not found on i2c-{port} @0x{address:02X}: {e}") from e
        info(f"[MOTOR] PCA9685 ready on i2c-{port} @0x{address:02X}")

    def _set_freq(self, freq_hz):
        prescale = int(round(OSC_HZ / (4096.0 * freq_hz))) - 1
        old_mode = self.bus.read_byte_data(self.address, MODE1)
        self.bus.write_byte_data(self.address, MODE1, (old_mode & 0x7F) | MODE1_SLEEP)
        self.bus.write_byte_data(self.address, PRESCALE, prescale)
        self.bus.write_byte_data(self.address, MODE1, old_mode)
        time.sleep(0.005)
        self.bus.write_byte_data(self.address, MODE1, old_mode | MODE1_RESTART | 0x20)  # auto-increment

    def _set_pwm(self, channel, on, off):
        reg = LED0_ON_L + 4 * channel
        self.bus.write_i2c_block_data(
            self.address, reg, [on & 0xFF, on >> 8, off & 0xFF, off >> 8]
        )

    _CHANNEL_ORDER = {
        Direction.CLOCKWISE: lambda self: (self.cw_channel, self.ccw_channel),
        Direction.COUNTER_CLOCKWISE: lambda self: (self.ccw_channel, self.cw_channel),
    }

    def run(self, direction: Direction, speed: int) -> None:
        check_speed("speed", speed)
        active, idle = self._CHANNEL_ORDER[direction](self)
        try:
            self._set_pwm(idle, 0, 0)
            self._set_pwm(active, 0, speed * SPEED_SCALE)
        except OSError as e:
            raise DriverUnavailable(f"motor write failed: {e}") from e
        debug(f"[MOTOR] run {direction.value} speed={speed}")

    def stop(self) -> None:
        try:
            self._set_pwm(self.cw_channel, 0, 0)
            self._set_pwm(self.ccw_channel, 0, 0)
        except OSError as e:
            raise DriverUnavailable(f"motor stop failed: {e}") from e
        debug("[MOTOR] stop")

    def close(self):
        try:
            self.stop()
        finally:
            self.bus.close()
