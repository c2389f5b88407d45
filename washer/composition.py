# washer/composition.py
from system import services
from system.gpio import pin_assignments as PINS
from system.input.button import InputButton
from system.log_utils import info, warn
from system.preferences import (
    KEY_BRAKE_SETTLE_MS,
    KEY_BUTTON_DEBOUNCE_MS,
    KEY_DEFAULT_SPEED,
    KEY_POLL_INTERVAL_MS,
    KEY_SELECTED_PROGRAM,
)
from washer.abort_signal import AbortSignal
from washer.engine import WasherEngine
from washer.programs import ProgramSelector, WashProgram, doors_closed


def build_engine() -> WasherEngine:
    prefs = services.preferences_service

    if services.abort_signal is None:
        services.abort_signal = AbortSignal()

    engine = WasherEngine(
        services.motor_driver,
        services.display_adapter,
        abort_signal=services.abort_signal,
        brake_settle_ms=prefs.get_int(KEY_BRAKE_SETTLE_MS),
        poll_interval_ms=prefs.get_int(KEY_POLL_INTERVAL_MS),
    )

    try:
        selected = WashProgram(prefs.get_int(KEY_SELECTED_PROGRAM))
    except ValueError:
        warn("[COMPOSE] stored program invalid, falling back to Normal")
        selected = WashProgram.NORMAL_WASH

    services.program_selector = ProgramSelector(
        selected,
        default_speed=prefs.get_int(KEY_DEFAULT_SPEED),
        on_change=_on_program_change,
    )

    # live preference changes apply to the next run
    prefs.register_callback(KEY_BRAKE_SETTLE_MS, lambda v: setattr(engine, "brake_settle_ms", int(v)))
    prefs.register_callback(KEY_POLL_INTERVAL_MS, lambda v: setattr(engine, "poll_interval_ms", int(v)))
    prefs.register_callback(KEY_DEFAULT_SPEED, lambda v: setattr(services.program_selector, "default_speed", int(v)))

    return engine


def _on_program_change(program: WashProgram) -> None:
    services.preferences_service.update_from_dict({KEY_SELECTED_PROGRAM: int(program)}, write_disk=True)
    engine = services.engine_service
    if engine is None or not engine.is_running():
        services.display_adapter.show_text(services.program_selector.label())


def on_program_button() -> None:
    engine = services.engine_service
    if engine is not None and engine.is_running():
        info("[BUTTON] program change ignored while running")
        return
    services.program_selector.cycle()


def door_closed() -> bool:
    return doors_closed(services.gpio_service, PINS.DOOR_PIN)


def on_start_button() -> None:
    if not door_closed():
        warn("[BUTTON] start ignored: door open")
        services.display_adapter.show_text("Door")
        return

    selector = services.program_selector
    ok, msg = services.engine_service.start_phases(selector.phases(), selector.label())
    if not ok:
        warn(f"[BUTTON] start ignored: {msg}")


def build_program_buttons() -> list:
    debounce_ms = services.preferences_service.get_int(KEY_BUTTON_DEBOUNCE_MS)
    return [
        InputButton(
            services.gpio_service,
            PINS.PROGRAM_BUTTON_PIN,
            debounce_ms=debounce_ms,
            on_press=on_program_button,
        ),
        InputButton(
            services.gpio_service,
            PINS.START_BUTTON_PIN,
            debounce_ms=debounce_ms,
            on_press=on_start_button,
        ),
    ]
