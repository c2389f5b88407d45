# pin_assignments.py

# -------------------------------
# Board inputs (active high)
# -------------------------------
# PC14 and PC15 start as inputs on boot, fine for buttons.
STOP_BUTTON_PIN    = "PC15"   # rising edge raises the abort signal
DOOR_PIN           = "PC14"   # 1 = door closed, falling edge raises abort
PROGRAM_BUTTON_PIN = "PH8"    # cycles Normal -> Gentle -> Spin
START_BUTTON_PIN   = "PC7"    # starts the selected program

INPUT_PINS = (STOP_BUTTON_PIN, DOOR_PIN, PROGRAM_BUTTON_PIN, START_BUTTON_PIN)

# -------------------------------
# Motor driver (PCA9685 on I2C)
# -------------------------------
MOTOR_I2C_PORT    = 3
MOTOR_I2C_ADDR    = 0x40
MOTOR_PWM_CW_CH   = 0         # M1 forward channel
MOTOR_PWM_CCW_CH  = 1         # M1 reverse channel
