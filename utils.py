"""
Utility functions shared by the peering scripts.
"""

import json
import logging
import sys
import termios
import tty
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.worksheet.table import Table

logger = logging.getLogger(__name__)

# Inventory configuration
# Path is relative to the project root (where utils.py is located)
INVENTORY_DIR = Path(__file__).parent / "inventory"


def get_inventory_path(resource_type: str, extension: str = 'json') -> Path:
    """
    Get the full path to an inventory file.

    Args:
        resource_type: Type of resource (e.g., 'peering')
        extension: File extension without dot (default: 'json')

    Returns:
        Path object to the inventory file (e.g., 'inventory/peering.json')
    """
    filename = f"{resource_type}.{extension}"
    return INVENTORY_DIR / filename


def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True
    )

    # Set specific logger levels for noisy libraries
    logging.getLogger('google').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def process_identifiers_input(identifiers: str) -> str:
    """
    Process identifier input, handling file input if prefixed with @.

    If the input starts with @, read identifiers from the specified file
    (one identifier per line, like copy-pasted from Excel).

    Args:
        identifiers: String containing identifiers or @filepath

    Returns:
        str: Comma-separated string of identifiers

    Raises:
        SystemExit: If file cannot be read or is empty
    """
    if not identifiers.startswith('@'):
        return identifiers

    file_path_str = identifiers[1:].strip()
    if not file_path_str:
        logger.error("No file path specified after @")
        sys.exit(1)

    file_path = Path(file_path_str).expanduser()
    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        sys.exit(1)

    try:
        lines = file_path.read_text().splitlines(keepends=True)
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        sys.exit(1)

    identifiers_list = [line.strip() for line in lines if line.strip()]
    if not identifiers_list:
        logger.error(f"No identifiers found in file: {file_path}")
        sys.exit(1)

    result = ','.join(identifiers_list)
    logger.info(
        f"Loaded {len(identifiers_list)} identifier(s) from {file_path}")
    return result


def truncate_project_name(project: str) -> str:
    """Truncate project name to max 20 chars (first 10 + ... + last 7)."""
    if len(project) > 20:
        return project[:10] + "..." + project[-7:]
    return project


def getch() -> str:
    """Get single character from user without waiting for Enter."""
    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        return sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def confirm_action(items: list[dict[str, Any]], action_description: str) -> bool:
    """
    Ask for confirmation before performing an action on items.

    Args:
        items: List of items for the action (with name, network, project info)
        action_description: Description of the action (e.g., "Delete 2 peerings")

    Returns:
        bool: True if user confirms, False otherwise
    """
    if not items:
        return False

    print(f"\n{action_description}:")
    print("-" * 60)

    for item in items:
        name = item.get('name', 'Unknown')
        project = item.get('project') or 'default'
        network = item.get('network', 'Unknown')
        print(f"{name} - {project}/{network}")

    print("-" * 60)
    print(f"Total: {len(items)} item(s)")

    print("\nContinue? (y/n): ", end='', flush=True)
    response = getch().lower()
    print(response)  # Echo the character
    return response == 'y'


def load_from_json(filename: str, missing_ok: bool = False) -> list[dict[str, Any]]:
    """
    Load items from JSON file with standardized error handling.

    Args:
        filename: Path to the JSON file
        missing_ok: Return an empty list instead of exiting if the file is absent

    Returns:
        List of items loaded from file

    Raises:
        SystemExit: If file not found (and not missing_ok) or invalid JSON
    """
    try:
        with open(filename, 'r') as f:
            return json.load(f)
    except FileNotFoundError:
        if missing_ok:
            return []
        logger.error(f"File {filename} not found. Run with --refresh first.")
        sys.exit(1)
    except json.JSONDecodeError:
        logger.error(f"Invalid JSON in {filename}")
        sys.exit(1)


def save_to_json(items: list[dict[str, Any]], filename: str):
    """
    Save items to JSON file with standardized formatting.

    Args:
        items: List of items to save
        filename: Path to save the JSON file
    """
    # Ensure directory exists
    file_path = Path(filename)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    file_path.write_text(json.dumps(items, indent=2))

    logger.info(f"Saved {len(items)} items to {filename}")


def save_to_excel(filename: str, title: str, headers: list[str], data: list[list[Any]]) -> None:
    """
    Save data to Excel file with filtering and sorting capabilities.

    Args:
        filename (str): Full path to the Excel file to create
        title (str): Worksheet title
        headers (list[str]): Column headers
        data (list[list[Any]]): Data rows (each row is a list of values)
    """
    if not data:
        logger.warning(f"No data to export to {filename}")
        return

    # Create directory if it doesn't exist
    file_path = Path(filename)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Create workbook and worksheet
    wb = Workbook()
    ws = wb.active
    ws.title = title

    ws.append(headers)
    for row in data:
        ws.append(row)

    # Create table for filtering and sorting
    table_range = f"A1:{chr(ord('A') + len(headers) - 1)}{len(data) + 1}"
    table_name = title.replace(' ', '') + "Table"
    ws.add_table(Table(displayName=table_name, ref=table_range))

    # Auto-adjust column widths
    for column in ws.columns:
        max_length = max(len(str(cell.value or '')) for cell in column)
        ws.column_dimensions[column[0].column_letter].width = min(max_length + 2, 80)

    wb.save(str(file_path))
    logger.info(f"Saved {len(data)} rows to {filename}")


def find_items_by_identifier(
    items: list[dict[str, Any]],
    identifiers: str,
    id_key: str = 'id',     # Key for ID lookup
    name_key: str = 'name'  # Key for name lookup
) -> list[dict[str, Any]]:
    """
    Find items by list index, ID, or name. Supports comma-separated values.

    Args:
        items: List of items to search through
        identifiers: Comma-separated list of indices (1-based), IDs, or names
        id_key: Key for ID lookup (default: 'id')
        name_key: Key for name lookup (default: 'name')

    Returns:
        List of matching items
    """
    identifier_list = [id.strip() for id in identifiers.split(',')]

    # Create lookup maps for faster searching
    id_map = {item.get(id_key): item for item in items if item.get(id_key)}
    name_map = {
        item.get(name_key): item for item in items if item.get(name_key)}

    matching_items = []

    for identifier in identifier_list:
        # Try to parse as integer (1-based list index)
        try:
            index = int(identifier)
            if 1 <= index <= len(items):
                matching_items.append(items[index - 1])
            else:
                logger.error(f"Index {index} out of range (1-{len(items)})")
        except ValueError:
            # Not an integer, try ID and name lookup
            if identifier in id_map:
                matching_items.append(id_map[identifier])
            elif identifier in name_map:
                matching_items.append(name_map[identifier])
            else:
                logger.error(f"No item found with ID or name: {identifier}")

    return matching_items
