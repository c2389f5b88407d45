import smbus2
from PIL import Image, ImageDraw, ImageFont

from system.log_utils import debug, info, warn
from washer.errors import DriverUnavailable

# ----------------------------------------------------------------------
# Global configuration
# ----------------------------------------------------------------------
I2C_PORT        = 3
OLED_ADDRS      = {0x3C, 0x3D}                # SH1106 / SSD1306 / SSD1315
LCD_ADDRS       = {0x27, 0x3F, 0x20, 0x21}    # PCF8574 / PCF8574A variants
LCD_ROWS        = 2                           # number of text rows
LCD_COLS        = 16                          # character columns per line
FONT_PATH       = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
FONT_SIZE       = 28                          # countdown digits on OLED
# ----------------------------------------------------------------------


class DisplayDriver:
    """OLED and/or character LCD found on the I2C bus."""

    def __init__(self, i2c_port=I2C_PORT):
        self.i2c_port = i2c_port
        self.oled = None
        self.lcd = None
        self.last_frame = None
        self._font = None
        self._detect_and_init()

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------
    def _detect_and_init(self):
        try:
            bus = smbus2.SMBus(self.i2c_port)
        except OSError as e:
            raise DriverUnavailable(f"i2c-{self.i2c_port} not available: {e}") from e

        found = []
        for addr in sorted(OLED_ADDRS | LCD_ADDRS):
            try:
                bus.write_quick(addr)
                found.append(addr)
            except OSError:
                pass
        bus.close()

        # --- OLED detection -------------------------------------------
        for addr in OLED_ADDRS & set(found):
            try:
                from luma.core.interface.serial import i2c
                from luma.oled.device import sh1106
                self.oled = sh1106(i2c(port=self.i2c_port, address=addr))
                debug(f"[DISPLAY] SH1106 OLED initialized at 0x{addr:02X}")
                break
            except (ImportError, OSError) as e:
                warn(f"[DISPLAY] OLED init failed: {e}")

        # --- LCD detection --------------------------------------------
        for addr in LCD_ADDRS & set(found):
            try:
                from RPLCD.i2c import CharLCD
                self.lcd = CharLCD('PCF8574', addr,
                                   port=self.i2c_port,
                                   cols=LCD_COLS,
                                   rows=LCD_ROWS)
                debug(f"[DISPLAY] HD44780 LCD initialized at 0x{addr:02X}")
                break
            except (ImportError, OSError) as e:
                warn(f"[DISPLAY] LCD init failed: {e}")

        if not self.oled and not self.lcd:
            raise DriverUnavailable(f"no display found on i2c-{self.i2c_port}")

        active = [name for name, dev in (("OLED", self.oled), ("LCD", self.lcd)) if dev]
        info(f"[DISPLAY] Active: {', '.join(active)}")

    def _get_font(self):
        if self._font is None:
            try:
                self._font = ImageFont.truetype(FONT_PATH, FONT_SIZE)
            except OSError:
                self._font = ImageFont.load_default()
        return self._font

    # ------------------------------------------------------------------
    def clear(self):
        """Clear both displays and reset frame cache."""
        try:
            if self.oled:
                self.oled.display(Image.new("1", (self.oled.width, self.oled.height)))
            if self.lcd:
                self.lcd.clear()
        except OSError as e:
            raise DriverUnavailable(f"display clear failed: {e}") from e
        self.last_frame = None

    # ------------------------------------------------------------------
    def draw_text(self, text: str):
        """Show one centered line; skipped when the frame is unchanged."""
        if text == self.last_frame:
            return

        try:
            if self.lcd:
                self.lcd.clear()
                self.lcd.cursor_pos = (0, 0)
                self.lcd.write_string(text[:LCD_COLS].center(LCD_COLS))

            if self.oled:
                img = Image.new("1", (self.oled.width, self.oled.height))
                draw = ImageDraw.Draw(img)
                font = self._get_font()
                left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
                x = (self.oled.width - (right - left)) // 2
                y = (self.oled.height - (bottom - top)) // 2
                draw.text((x, y), text, font=font, fill=255)
                self.oled.display(img)
        except OSError as e:
            raise DriverUnavailable(f"display update failed: {e}") from e

        self.last_frame = text
