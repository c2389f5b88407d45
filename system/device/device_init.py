# device/device_init.py
from system import services
from system.gpio import pin_assignments as PINS
from system.log_utils import error, info
from system.preferences import KEY_SIMULATOR_ENABLED
from washer.errors import DriverUnavailable


def _simulated() -> bool:
    return services.preferences_service.get_bool(KEY_SIMULATOR_ENABLED)


def init_preferences_service(filename=None):
    from system.preferences import Preferences
    services.preferences_service = Preferences(filename) if filename else Preferences()


def init_gpio_service():
    if _simulated():
        from system.gpio.sim_gpio import SimGPIO
        services.gpio_service = SimGPIO({PINS.DOOR_PIN: 1})
        info("[DEVICE] GPIO: simulator")
        return

    from system.gpio.gpio_control import GPIOController
    services.gpio_service = GPIOController()
    info(f"[DEVICE] GPIO: {services.gpio_service.chip_path}")


def init_motor_driver():
    if _simulated():
        from system.motor.sim_motor import SimMotorDriver
        services.motor_driver = SimMotorDriver()
        return

    from system.motor.i2c_motor import I2CMotorDriver
    services.motor_driver = I2CMotorDriver(
        PINS.MOTOR_I2C_PORT,
        PINS.MOTOR_I2C_ADDR,
        PINS.MOTOR_PWM_CW_CH,
        PINS.MOTOR_PWM_CCW_CH,
    )


def init_display_stack():
    from system.display.display_adapter import DisplayAdapter

    if _simulated():
        services.display_adapter = DisplayAdapter()
        return

    from system.display.display_driver import DisplayDriver
    try:
        services.display_adapter = DisplayAdapter(DisplayDriver())
    except DriverUnavailable as e:
        # web API stays up; countdown calls raise so every phase fails
        error(f"[DEVICE] display unavailable, phases will fail: {e}")
        services.display_adapter = DisplayAdapter(missing=str(e))


def init_engine():
    from washer.composition import build_engine
    services.engine_service = build_engine()
    services.display_adapter.attach_engine(services.engine_service)


def init_abort_buttons():
    from system.input.abort_buttons import AbortButtonMonitor
    services.abort_monitor = AbortButtonMonitor(
        services.gpio_service,
        services.abort_signal,
        stop_pin=PINS.STOP_BUTTON_PIN,
        door_pin=PINS.DOOR_PIN,
    )
    services.abort_monitor.start()


def init_program_buttons():
    from washer.composition import build_program_buttons
    services.input_buttons = build_program_buttons()
    for button in services.input_buttons:
        button.start()


def init_all(prefs_file=None):
    init_preferences_service(prefs_file)
    init_gpio_service()
    init_motor_driver()
    init_display_stack()
    init_engine()
    init_abort_buttons()
    init_program_buttons()
