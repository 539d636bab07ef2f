"""Host-tunable machine configuration."""

from flax.struct import dataclass, field


@dataclass(frozen=True)
class MachineConfig:
    """Configuration for a :class:`chipvm.machine.Machine`.

    Attributes:
        seed: Seed of the PRNG key feeding CXNN, restored on every reset
        instruction_frequency: CPU frequency in Hz used by ``run_frame`` (typically 700)
        timer_frequency: Timer frequency in Hz (60 on every CHIP-8 interpreter)
        log_level: Threshold of the machine's console logger
        use_colors: Colour log levels when stdout is a terminal
    """
    seed: int = field(pytree_node=False, default=0)
    instruction_frequency: int = field(pytree_node=False, default=700)
    timer_frequency: int = field(pytree_node=False, default=60)
    log_level: str = field(pytree_node=False, default="WARNING")
    use_colors: bool = field(pytree_node=False, default=True)

    @property
    def instructions_per_frame(self) -> int:
        """Number of instructions executed between two timer ticks."""
        return max(1, self.instruction_frequency // self.timer_frequency)
