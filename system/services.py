# services.py
from system.display.display_adapter import DisplayAdapter
from system.input.abort_buttons import AbortButtonMonitor
from system.preferences import Preferences
from washer.abort_signal import AbortSignal
from washer.engine import WasherEngine
from washer.programs import ProgramSelector

# ------------------------------------------------------------------------------
# Service singletons (initialized in order in device_init.py)
# ------------------------------------------------------------------------------

preferences_service: Preferences = None

gpio_service = None        # GPIOController or SimGPIO

motor_driver = None        # I2CMotorDriver or SimMotorDriver

display_adapter: DisplayAdapter = None

abort_signal: AbortSignal = None

engine_service: WasherEngine = None

program_selector: ProgramSelector = None

abort_monitor: AbortButtonMonitor = None

input_buttons: list = []
