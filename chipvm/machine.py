"""Host-facing CHIP-8 machine."""

import jax
import jax.numpy as jnp

from chipvm.config import MachineConfig
from chipvm.constants import NUM_KEYS, NO_KEY_WAIT
from chipvm.errors import Chip8Error, KeyIndexError
from chipvm.emulator import step, tick_timers, load_program, load_rom
from chipvm.logging import ConsoleLogger, build_tqdm_progress_bar
from chipvm.state import MachineState, create_state


class Machine:
    """Mutable CHIP-8 machine driven by a host application.

    The machine wraps an immutable :class:`MachineState` and rebinds it after
    every operation. A handler that raises leaves the previous state in place,
    so the host can inspect it, ``reset`` or replace it.

    Typical host loop::

        machine = Machine()
        machine.load_rom("pong.ch8")
        while running:
            for key, pressed in poll_input():
                machine.keypress(key, pressed)
            machine.run_frame()
            draw(machine.get_display())
    """

    def __init__(self, config: MachineConfig | None = None):
        self.config = config or MachineConfig()
        self.logger = ConsoleLogger(
            name="chipvm",
            log_level=self.config.log_level,
            use_colors=self.config.use_colors,
        )
        self._state = self._initial_state()

    def _initial_state(self) -> MachineState:
        return create_state(jax.random.PRNGKey(self.config.seed))

    @property
    def state(self) -> MachineState:
        """Current machine state."""
        return self._state

    @state.setter
    def state(self, state: MachineState):
        self._state = state

    @property
    def pc(self) -> int:
        return int(self._state.pc)

    @property
    def index(self) -> int:
        return int(self._state.I)

    @property
    def registers(self) -> jnp.ndarray:
        return self._state.V

    @property
    def sound_active(self) -> bool:
        """True while the sound timer is running; hosts should play a tone."""
        return bool(self._state.sound_timer > 0)

    @property
    def waiting_for_key(self) -> bool:
        return self._state.waiting_key != NO_KEY_WAIT

    def reset(self):
        """Return every field to its initial value."""
        self._state = self._initial_state()
        self.logger.info("Machine reset")

    def load(self, data: bytes):
        """Copy program bytes into memory at the program start address."""
        self._state = load_program(self._state, data)
        if not data:
            self.logger.warning("Loaded an empty program")
        else:
            self.logger.info(f"Loaded {len(data)} bytes of program")

    def load_rom(self, filename: str):
        """Load a ROM file into memory at the program start address."""
        self._state = load_rom(self._state, filename)
        self.logger.info(f"Loaded ROM {filename}")

    def tick(self):
        """Execute exactly one instruction, or poll the keypad while awaiting a key."""
        address = self.pc
        try:
            state, decoded = step(self._state)
        except Chip8Error as e:
            self.logger.error(f"Halted at pc=0x{address:03X}: {e}")
            raise
        if decoded is not None and self.logger.is_enabled_for("DEBUG"):
            self.logger.debug(f"pc=0x{address:03X} op=0x{decoded.raw:04X} {decoded.op.name}")
        self._state = state

    def tick_timers(self):
        """Decrement delay and sound timers, floored at zero."""
        self._state = tick_timers(self._state)

    def keypress(self, index: int, pressed: bool):
        """Set the pressed state of key ``index`` (0x0-0xF)."""
        if not 0 <= index < NUM_KEYS:
            raise KeyIndexError(f"Key index {index} outside 0-{NUM_KEYS - 1}")
        self._state = self._state.replace(keypad=self._state.keypad.at[index].set(bool(pressed)))

    def get_display(self) -> jnp.ndarray:
        """Read-only 32x64 boolean framebuffer, indexed ``[row, col]``."""
        return self._state.display

    def run(self, n: int, progress: bool = False):
        """Execute ``n`` ticks, optionally showing a progress bar."""
        if not progress:
            for _ in range(n):
                self.tick()
            return

        update_progress_bar, close_progress_bar = build_tqdm_progress_bar(n)
        done = 0
        try:
            for i in range(n):
                self.tick()
                update_progress_bar(i)
                done = i + 1
        finally:
            close_progress_bar(done)

    def run_frame(self):
        """Execute one frame worth of instructions then tick the timers once."""
        self.run(self.config.instructions_per_frame)
        self.tick_timers()
