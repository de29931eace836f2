# --- File: storage_cli.py ---
import argparse
import asyncio
import sys
from typing import Optional

# Import necessary components from your project structure
import config
from core.factory import build_local_client
from cid_crypto.errors import BlackBoxError
from security.blackbox_client import BlackBoxClient
from utils import describe_file, short_cid

import logging

logger = logging.getLogger(__name__)

# --- Helper Functions ---

def resolve_owner(owner: Optional[str]) -> str:
    resolved = owner or config.OWNER_ADDRESS
    if not resolved:
        raise SystemExit("No owner given. Pass --owner or set OWNER_ADDRESS.")
    return resolved

# --- Commands ---

def cmd_address(args, client: BlackBoxClient):
    print(f"BlackBoxStorage address is {client.contract_address}")

def cmd_add_file(args, client: BlackBoxClient):
    owner = resolve_owner(args.owner)
    if args.file:
        logger.info(f"Computing CID for {describe_file(args.file)}")
        stored = client.store_file(owner, args.file, args.name)
    else:
        stored = client.store_cid(owner, args.name, args.cid)
    logger.info(f"Stored {short_cid(stored.cid)} for {owner} at index {stored.index}")
    print(f"Stored name=\"{stored.file_name}\" index={stored.index} cid=\"{stored.cid}\" "
          f"with encrypted addressA handle={stored.encrypted_address_a}")

def cmd_list(args, client: BlackBoxClient):
    owner = resolve_owner(args.owner)
    count = client.count_files(owner)
    print(f"BlackBoxStorage={client.contract_address} owner={owner} count={count}")
    revealed = asyncio.run(client.list_files(owner, args.caller))
    for f in revealed:
        print(f"#{f.index} name=\"{f.file_name}\" createdAt={f.created_at} cid=\"{f.cid}\"")

def cmd_count(args, client: BlackBoxClient):
    owner = resolve_owner(args.owner)
    print(client.count_files(owner))

def cmd_share(args, client: BlackBoxClient):
    owner = resolve_owner(args.owner)
    client.share_file(owner, args.index, args.viewer)
    print(f"Shared index={args.index} of owner={owner} with viewer={args.viewer}")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Store and reveal encrypted IPFS CIDs.")
    parser.add_argument("--contract", type=str, default=config.CONTRACT_ADDRESS, help="Storage contract address used as the reveal context.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_address = subparsers.add_parser("address", help="Print the storage contract address.")
    p_address.set_defaults(func=cmd_address)

    p_add = subparsers.add_parser("add-file", help="Encrypt a CID under a fresh key-carrier and store it.")
    p_add.add_argument("--name", type=str, help="File name to store. Defaults to the basename of --file.")
    source = p_add.add_mutually_exclusive_group()
    source.add_argument("--cid", type=str, help="CID to store. A random demo CID is used if neither --cid nor --file is given.")
    source.add_argument("--file", type=str, help="Local file whose CID should be computed and stored.")
    p_add.add_argument("--owner", type=str, help="Owner address (defaults to OWNER_ADDRESS).")
    p_add.set_defaults(func=cmd_add_file)

    p_list = subparsers.add_parser("list", help="Reveal and print every stored record.")
    p_list.add_argument("--owner", type=str, help="Owner address (defaults to OWNER_ADDRESS).")
    p_list.add_argument("--caller", type=str, help="Identity requesting the reveal (defaults to the owner).")
    p_list.set_defaults(func=cmd_list)

    p_count = subparsers.add_parser("count", help="Print the number of stored records.")
    p_count.add_argument("--owner", type=str, help="Owner address (defaults to OWNER_ADDRESS).")
    p_count.set_defaults(func=cmd_count)

    p_share = subparsers.add_parser("share", help="Allow another account to reveal one of the owner's records.")
    p_share.add_argument("--index", type=int, required=True, help="Record index to share.")
    p_share.add_argument("--viewer", type=str, required=True, help="Account that may reveal the record.")
    p_share.add_argument("--owner", type=str, help="Owner address (defaults to OWNER_ADDRESS).")
    p_share.set_defaults(func=cmd_share)
    return parser

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "add-file" and not (args.name or args.file):
        parser.error("add-file requires --name unless --file is given")

    client = build_local_client(args.contract)
    try:
        args.func(args, client)
    except BlackBoxError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    finally:
        client.ledger.close()
    return 0

if __name__ == "__main__":
    sys.exit(main())
