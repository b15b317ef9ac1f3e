import argparse
import logging
import sys

import uvicorn

from .config import configure_logging, settings
from .main_app import create_app
from .services.iso_image import ImageError, load_iso_tree
from .services.netaddr import local_ipv4_addresses

logger = logging.getLogger("isoboot")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "isoboot",
        description="Serve an ISO image over HTTP together with an iPXE boot script.",
    )
    parser.add_argument("--iso", default=settings.iso_path, help="Path to the ISO file")
    parser.add_argument(
        "--kernel", default=settings.kernel_path, help="Path to the kernel file relative to the ISO root"
    )
    parser.add_argument(
        "--initrd",
        action="append",
        default=None,
        help="Initrd file relative to the ISO root, optionally followed by ',name' (repeatable)",
    )
    parser.add_argument("--params", default=settings.kernel_params, help="Parameters to pass to the kernel at boot")
    parser.add_argument("--port", type=int, default=settings.api_port, help="Port number to listen on")
    parser.add_argument("--host", default=settings.api_host, help="Address to bind")
    parser.add_argument(
        "--boot-host",
        default=settings.boot_host,
        help="host[:port] written into the boot script instead of the request's Host header",
    )
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def print_banner(addresses: list[str], port: int) -> None:
    for ip in addresses:
        print(f"Serving on http://{ip}:{port}")
        print(f"To boot from iPXE: chain --autofree http://{ip}:{port}/boot.ipxe")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv and not settings.iso_path:
        parser.print_usage(sys.stderr)
        sys.exit(1)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    if not args.iso:
        logger.error("Please provide the path to an ISO file.")
        sys.exit(1)

    run_settings = settings.model_copy(
        update={
            "iso_path": args.iso,
            "kernel_path": args.kernel,
            "initrds": args.initrd if args.initrd is not None else settings.initrds,
            "kernel_params": args.params,
            "api_host": args.host,
            "api_port": args.port,
            "boot_host": args.boot_host,
            "log_level": args.log_level,
        }
    )

    try:
        image = load_iso_tree(run_settings.iso_path, max_idle=run_settings.handle_pool_max_idle)
    except ImageError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    try:
        addresses = local_ipv4_addresses()
    except (OSError, RuntimeError) as exc:
        logger.error("Failed to get local IPs: %s", exc)
        image.close()
        sys.exit(1)

    boot = run_settings.boot_configuration()
    if not boot.is_configured:
        logger.info("No kernel or initrd configured; /boot.ipxe will answer 404")
    print_banner(addresses, run_settings.api_port)

    app = create_app(image, boot_config=boot, settings=run_settings)
    try:
        uvicorn.run(app, host=run_settings.api_host, port=run_settings.api_port, log_level=run_settings.log_level.lower())
    finally:
        image.close()


if __name__ == "__main__":
    main()
