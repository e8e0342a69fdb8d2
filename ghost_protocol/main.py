import argparse
import json
import mimetypes
import sys
from dataclasses import asdict
from pathlib import Path

from ghost_protocol.chain.exceptions import ChainError
from ghost_protocol.chain.factory import ChainClientFactory
from ghost_protocol.chain.models import address_url
from ghost_protocol.config.exceptions import ConfigurationError
from ghost_protocol.config.settings import Settings
from ghost_protocol.logging.logger import Log
from ghost_protocol.registration.factory import RegistrationSessionFactory
from ghost_protocol.registration.models import LicenseType
from ghost_protocol.storage.models import UploadedFile

mimetypes.add_type("application/epub+zip", ".epub")
mimetypes.add_type(
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document", ".docx"
)


def _parse_beneficiary(raw: str) -> tuple[str, str, float]:
    try:
        address, name, percentage = raw.split(":", 2)
        return address, name, float(percentage)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Beneficiary must be ADDRESS:NAME:PERCENT, got '{raw}'"
        ) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghost-protocol",
        description="Register creative works as IP assets on Story Protocol.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the upload and analysis HTTP API")

    register = sub.add_parser("register", help="Upload, analyse and register a file")
    register.add_argument("file", type=Path)
    register.add_argument("--media-type", help="Override the guessed media type")
    register.add_argument("--creator", required=True)
    register.add_argument("--title", help="Override the analysed title")
    register.add_argument("--deceased", action="store_true")
    register.add_argument("--death-year", type=int)
    register.add_argument("--estate-representative", default="")
    register.add_argument(
        "--beneficiary",
        action="append",
        type=_parse_beneficiary,
        default=[],
        metavar="ADDRESS:NAME:PERCENT",
    )
    register.add_argument("--license", choices=[t.value for t in LicenseType], default="open")
    register.add_argument("--royalty", type=int, default=15)
    register.add_argument("--tag", action="append", default=[])
    register.add_argument("--allow-ai-training", action="store_true")
    register.add_argument("--ai-price", type=float, default=0.001)

    sub.add_parser("check-contracts", help="Verify the network and deployed contracts")
    return parser


def serve(settings: Settings) -> int:
    import uvicorn

    from ghost_protocol.api.server import create_app

    settings.require_secrets()
    Log.info(f"Ghost Protocol API listening on {settings.api_host}:{settings.api_port}")
    uvicorn.run(create_app(settings), host=settings.api_host, port=settings.api_port)
    return 0


def register(settings: Settings, args: argparse.Namespace) -> int:
    session = RegistrationSessionFactory.create(settings)
    session.start()
    try:
        if session.wallet_address is None and not session.connect_wallet():
            Log.error("Set WALLET_PRIVATE_KEY to sign transactions")
            return 1

        media_type = args.media_type or mimetypes.guess_type(args.file.name)[0] or ""
        upload = session.upload_and_analyze(
            UploadedFile(file_name=args.file.name, media_type=media_type, content=args.file.read_bytes())
        )
        if not upload.success:
            Log.error(f"Upload failed: {upload.error}")
            return 1

        form = session.form
        form.creator_name = args.creator
        form.is_deceased = args.deceased
        form.death_year = args.death_year
        form.estate_representative = args.estate_representative
        if args.title and form.analysis is not None:
            form.analysis = type(form.analysis)(**{**asdict(form.analysis), "title": args.title})
        for tag in args.tag:
            form.add_tag(tag)
        for address, name, percentage in args.beneficiary:
            form.add_beneficiary(address, name, percentage)
        form.license_type = LicenseType(args.license)
        form.set_royalty_rate(args.royalty)
        form.allow_ai_training = args.allow_ai_training
        form.ai_training_price = args.ai_price

        while session.next_step():
            pass
        if session.errors:
            for field_name, message in session.errors.items():
                Log.error(f"{field_name}: {message}")
            return 1

        result = session.submit()
        print(json.dumps(asdict(result), default=str, indent=2))
        return 0 if result.success else 1
    finally:
        session.close()


def check_contracts(settings: Settings) -> int:
    chain = ChainClientFactory.create(settings)
    try:
        chain_id = chain.chain_id()
    except ChainError as exc:
        Log.error(f"Network unreachable: {exc}")
        return 1
    if chain_id != settings.chain_id:
        Log.error(f"Wrong network: chain id {chain_id}, expected {settings.chain_id}")
        return 1
    Log.info(f"Connected to chain {chain_id} via {settings.chain_rpc_url}")

    healthy = True
    for name, address in (
        ("IP registry", settings.ip_registry_address),
        ("Ghost Wallet factory", settings.ghost_wallet_factory_address),
        ("Ghost Wallet implementation", settings.ghost_wallet_implementation_address),
    ):
        try:
            deployed = chain.is_deployed(address)
        except ChainError as exc:
            Log.error(f"{name}: {exc}")
            healthy = False
            continue
        status = "deployed" if deployed else "NOT DEPLOYED"
        Log.info(f"{name}: {status} ({address_url(settings.chain_explorer_url, address)})")
        healthy = healthy and deployed

    if healthy:
        Log.info(
            f"Registered assets: {chain.get_total_assets()}, "
            f"Ghost Wallets: {chain.get_total_wallets()}"
        )
    return 0 if healthy else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    try:
        if args.command == "serve":
            return serve(settings)
        if args.command == "register":
            return register(settings, args)
        return check_contracts(settings)
    except ConfigurationError as exc:
        Log.error(str(exc))
        return 2


if __name__ == "__main__":
    sys.exit(main())
