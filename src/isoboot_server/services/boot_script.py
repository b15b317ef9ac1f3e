"""iPXE boot script generation."""

from __future__ import annotations

from dataclasses import dataclass, field

SCRIPT_MARKER = "#!ipxe"


@dataclass(frozen=True)
class InitrdSpec:
    path: str
    label: str | None = None


@dataclass(frozen=True)
class BootConfiguration:
    kernel_path: str = ""
    kernel_params: str = ""
    initrds: tuple[InitrdSpec, ...] = field(default_factory=tuple)

    @property
    def is_configured(self) -> bool:
        return bool(self.kernel_path) and bool(self.initrds)


def parse_initrd_spec(value: str) -> InitrdSpec:
    """Parse ``path[,label]`` as given on the command line.

    The label is the second comma-separated field; further fields are
    ignored and an empty label counts as no label at all.
    """
    parts = value.split(",")
    label = parts[1] if len(parts) > 1 else None
    return InitrdSpec(path=parts[0], label=label or None)


def generate(config: BootConfiguration, request_host: str) -> str | None:
    """Render the iPXE script, or ``None`` when boot is not configured.

    ``request_host`` is used verbatim as the authority of every URL.
    """
    if not config.is_configured:
        return None

    base = f"http://{request_host}"
    lines = [
        SCRIPT_MARKER,
        f"kernel {base}{config.kernel_path} {config.kernel_params}",
    ]
    for initrd in config.initrds:
        line = f"initrd {base}{initrd.path}"
        if initrd.label:
            line += f" {initrd.label}"
        lines.append(line)
    lines.append("boot")
    return "\n".join(lines)
