"""
A typed builder for external commands whose arguments may contain secrets.

Secrets are wrapped in `Secret` when the command is built, so every rendering
of the command for logs redacts them without knowing their positions.
"""

from dataclasses import dataclass, field

REDACTED = "***"


@dataclass(frozen=True)
class Secret:
    """A string that only reveals its value through `reveal()`."""

    value: str = field(repr=False)

    def reveal(self) -> str:
        return self.value

    def __str__(self) -> str:
        return REDACTED


Argument = str | Secret


@dataclass(frozen=True)
class Option:
    """A `--name [value]` pair."""

    name: str
    value: Argument | None = None

    def arguments(self) -> list[Argument]:
        if self.value is None:
            return [self.name]
        return [self.name, self.value]


@dataclass(frozen=True)
class Command:
    program: str
    positionals: tuple[str, ...] = ()
    options: tuple[Option, ...] = ()

    @property
    def secrets(self) -> list[Secret]:
        return [o.value for o in self.options if isinstance(o.value, Secret)]

    def argv(self) -> list[str]:
        """The real argument vector, secrets included. Never log this."""
        args: list[str] = [*self.positionals]
        for option in self.options:
            for arg in option.arguments():
                args.append(arg.reveal() if isinstance(arg, Secret) else arg)
        return args

    def redacted(self) -> str:
        """A multi-line rendering for logs with every secret replaced."""
        lines = [" ".join([self.program, *self.positionals])]
        for option in self.options:
            lines.append(" ".join(str(arg) for arg in option.arguments()))
        return "\n>  ".join(lines)

    def __str__(self) -> str:
        return self.redacted()


class CommandBuilder:
    """
    Usage:
        command = (
            CommandBuilder("npx", "some-package", "upload")
            .option("--zip", zip_path)
            .secret_option("--token", token)
            .flag("--dry-run", enabled=dry_run)
            .build()
        )
    """

    def __init__(self, program: str, *positionals: str):
        self._program = program
        self._positionals = tuple(positionals)
        self._options: list[Option] = []

    def option(self, name: str, value: str) -> "CommandBuilder":
        self._options.append(Option(name, str(value)))
        return self

    def secret_option(self, name: str, value: str) -> "CommandBuilder":
        self._options.append(Option(name, Secret(value)))
        return self

    def flag(self, name: str, enabled: bool = True) -> "CommandBuilder":
        if enabled:
            self._options.append(Option(name))
        return self

    def build(self) -> Command:
        return Command(
            program=self._program,
            positionals=self._positionals,
            options=tuple(self._options),
        )
