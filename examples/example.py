import sys
import time

from chipvm import Machine, MachineConfig
from chipvm.rendering import display_to_rgb, display_to_text, create_color_scheme


def save_ppm(filename, rgb):
    """Write an RGB frame as a binary PPM image."""
    height, width, _ = rgb.shape
    with open(filename, "wb") as f:
        f.write(f"P6 {width} {height} 255\n".encode("ascii"))
        f.write(rgb.tobytes())


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python examples/example.py ROM [FRAMES] [SCREENSHOT.ppm]")
        sys.exit(1)

    rom_path = sys.argv[1]
    frames = int(sys.argv[2]) if len(sys.argv) > 2 else 120
    screenshot = sys.argv[3] if len(sys.argv) > 3 else None

    machine = Machine(MachineConfig(log_level="INFO"))
    machine.load_rom(rom_path)

    start = time.time()
    for _ in range(frames):
        machine.run_frame()
    elapsed = time.time() - start

    print(display_to_text(machine.get_display()))
    print(f"{frames} frames in {elapsed:.2f}s, pc=0x{machine.pc:03X}")

    if screenshot:
        on_color, off_color = create_color_scheme("amber")
        save_ppm(screenshot, display_to_rgb(machine.get_display(), 8, on_color, off_color))
        print(f"Saved {screenshot}")
