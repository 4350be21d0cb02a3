#!/usr/bin/env python3
"""
VPC Peering Management Script - Create, import, refresh and delete GCP VPC network peerings.

Tracked peerings are kept in the inventory (inventory/peering.json). Every
action reconciles the inventory with what Compute Engine reports:
- Create a peering and wait for the operation to finish
- Import an existing peering by name
- Refresh state/state details of every tracked peering (drops vanished ones)
- Delete selected peerings
- Export the inventory to inventory/peering.xlsx on refresh

Usage examples:
  # Create a peering from net-1 to net-2
  python peering.py -c --name peer-a --network net-1 \\
      --peer-network projects/other/global/networks/net-2 --auto-create-routes

  # Import an existing peering
  python peering.py --import peer-b --network net-1 --project my-project

  # List tracked peerings
  python peering.py

  # Refresh all tracked peerings from GCP
  python peering.py --refresh

  # Delete peerings by index, ID, or name
  python peering.py -i 1,peer-b -d
"""

import argparse
import logging
import sys
from typing import Any

from google.api_core.exceptions import GoogleAPICallError
from tabulate import tabulate

import config
from gcpsvc.errors import PeeringError
from gcpsvc.network import get_network_name
from gcpsvc.peering import PeeringConnection, PeeringController
from utils import (confirm_action, find_items_by_identifier, get_inventory_path,
                   load_from_json, process_identifiers_input, save_to_excel,
                   save_to_json, setup_logging, truncate_project_name)

logger = logging.getLogger(__name__)

EXCEL_HEADERS = ["Name", "Project", "Network", "Peer Network",
                 "Auto Routes", "State", "State Details"]


def load_inventory() -> list[dict[str, Any]]:
    """Load tracked peerings (empty if nothing is tracked yet)."""
    return load_from_json(str(get_inventory_path('peering', 'json')), missing_ok=True)


def save_inventory(items: list[dict[str, Any]]) -> None:
    save_to_json(items, str(get_inventory_path('peering', 'json')))


def default_project(controller: PeeringController) -> str | None:
    """Project a peering without an explicit project belongs to."""
    return controller.default_project or config.get_default_project()


def _same_peering(item: dict[str, Any], other: dict[str, Any],
                  project: str | None = None) -> bool:
    """Match inventory entries by id, network name and resolved project."""
    return (item.get('id') == other.get('id')
            and get_network_name(item.get('network')) == get_network_name(other.get('network'))
            and (item.get('project') or project) == (other.get('project') or project))


def upsert(items: list[dict[str, Any]], connection: PeeringConnection,
           project: str | None = None) -> list[dict[str, Any]]:
    """Replace the inventory entry for connection, or append it."""
    entry = connection.to_dict()
    kept = [item for item in items if not _same_peering(item, entry, project)]
    kept.append(entry)
    return kept


def prepare_peering_table_data(peerings: list[dict[str, Any]]) -> list[list[Any]]:
    """Prepare peering data for Excel export."""
    return [
        [
            p.get('name', ''),
            p.get('project') or '',
            p.get('network', ''),
            p.get('peer_network', ''),
            p.get('auto_create_routes', False),
            p.get('state', ''),
            p.get('state_details', ''),
        ]
        for p in peerings
    ]


def print_peerings(peerings: list[dict[str, Any]]) -> None:
    """Print peerings in a table format."""
    if not peerings:
        logger.info("No VPC peerings tracked.")
        return

    table_data = []
    for idx, p in enumerate(peerings, 1):
        project = truncate_project_name(p.get('project') or 'default')
        peer_network = p.get('peer_network', '').split('/')[-1]
        table_data.append([idx, p.get('name', ''), project, p.get('network', ''),
                          peer_network, 'yes' if p.get('auto_create_routes') else 'no',
                          p.get('state', '')])

    headers = ["ID", "Name", "Project", "Network",
               "Peer Network", "Auto Routes", "State"]
    print(tabulate(table_data, headers=headers, tablefmt="github"))
    print()


def parse_arguments(argv: list[str] = None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Create and manage GCP VPC network peerings',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Actions
    parser.add_argument(
        '-r', '--refresh',
        action='store_true',
        help='Refresh every tracked peering from GCP and save the inventory'
    )
    parser.add_argument(
        '-c', '--create',
        action='store_true',
        help='Create a peering (requires --name, --network and --peer-network)'
    )
    parser.add_argument(
        '--import',
        dest='import_id',
        type=str,
        help='Start tracking an existing peering by name (requires --network)'
    )
    parser.add_argument(
        '-d', '--delete',
        action='store_true',
        help='Delete the selected peerings'
    )

    # Peering fields
    parser.add_argument('--name', type=str, help='Peering name')
    parser.add_argument('--network', type=str,
                        help='Network that owns the peering (name or self link)')
    parser.add_argument('--peer-network', type=str,
                        help='Network to peer with (self link)')
    parser.add_argument('--project', type=str,
                        help='GCP project (defaults to the configured project)')
    parser.add_argument('--auto-create-routes', action='store_true',
                        help='Automatically create routes for the peering')

    # Selection
    parser.add_argument(
        '-i', '--peerings',
        type=str,
        help='Selection: peering indices (comma-separated, e.g., "1,3") or IDs/names. Use @filepath to load from file'
    )
    parser.add_argument(
        '-y', '--yes',
        action='store_true',
        help='Do not ask for confirmation before deleting'
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        help='Logging level (default: INFO)'
    )

    args = parser.parse_args(argv)

    if args.create and not all([args.name, args.network, args.peer_network]):
        logger.error("--create requires --name, --network and --peer-network.")
        sys.exit(1)

    if args.import_id and not args.network:
        logger.error("--import requires --network.")
        sys.exit(1)

    return args


def create(args, controller: PeeringController) -> None:
    """Create a peering and record it in the inventory."""
    connection = PeeringConnection(
        name=args.name,
        network=args.network,
        peer_network=args.peer_network,
        project=args.project,
        auto_create_routes=args.auto_create_routes
    )
    try:
        result = controller.create(connection)
    finally:
        # The id is set once the API accepts the request, even if the wait fails
        if connection.id:
            save_inventory(upsert(load_inventory(), connection, default_project(controller)))

    if result is None:
        logger.warning(f"Peering {args.name} was not found after creation")
        return
    logger.info(f"Peering {result.name} is {result.state}: {result.state_details}")


def import_peering(args, controller: PeeringController) -> None:
    """Import an existing peering; it is tracked only if it can be read."""
    connection = controller.import_state(args.import_id, args.network, args.project)
    if controller.read(connection) is None:
        logger.warning(
            f"Peering {args.import_id} not found in network {args.network}, nothing imported")
        return

    save_inventory(upsert(load_inventory(), connection, default_project(controller)))
    logger.info(f"Imported peering {connection.name} ({connection.state})")


def refresh(controller: PeeringController) -> list[dict[str, Any]]:
    """Refresh the inventory - read every tracked peering and save to files."""
    refreshed = []
    for item in load_inventory():
        connection = PeeringConnection.from_dict(item)
        if controller.read(connection) is not None:
            refreshed.append(connection.to_dict())

    save_inventory(refreshed)
    excel_path = get_inventory_path('peering', 'xlsx')
    if refreshed:
        save_to_excel(str(excel_path), "Peerings",
                      EXCEL_HEADERS, prepare_peering_table_data(refreshed))
    elif excel_path.exists():
        # Nothing left to export, drop the sheet listing vanished peerings
        excel_path.unlink()
        logger.info(f"Removed {excel_path}")
    return refreshed


def delete(targets: list[dict[str, Any]], controller: PeeringController,
           confirm: bool = True) -> None:
    """Delete peerings and drop them from the inventory one by one."""
    if confirm and not confirm_action(targets, f"Delete {len(targets)} peering(s)"):
        logger.info("Operation cancelled.")
        return

    for item in targets:
        connection = PeeringConnection.from_dict(item)
        controller.delete(connection)
        remaining = [i for i in load_inventory()
                     if not _same_peering(i, item, default_project(controller))]
        save_inventory(remaining)


def run(args, controller: PeeringController) -> None:
    """Dispatch the requested action."""
    if args.create:
        create(args, controller)
        return

    if args.import_id:
        import_peering(args, controller)
        return

    if args.refresh:
        print_peerings(refresh(controller))
        return

    targets = load_inventory()
    if args.peerings:
        identifiers = process_identifiers_input(args.peerings)
        targets = find_items_by_identifier(targets, identifiers)
        if not targets:
            logger.warning("No peerings found matching the specified identifiers.")
            return

    if args.delete:
        # Safety check: require a selection when deleting
        if not args.peerings:
            logger.error("Delete action requires a selection (-i).")
            return
        delete(targets, controller, confirm=not args.yes)
    else:
        print_peerings(targets)


def main(argv: list[str] = None) -> None:
    """Main function to execute the script."""
    args = parse_arguments(argv)
    setup_logging(args.log_level)

    controller = PeeringController()
    try:
        run(args, controller)
    except (PeeringError, GoogleAPICallError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
