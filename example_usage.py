"""
Example usage of the XML table editor core.

This demonstrates how to drive a TableSession programmatically: open a
file, show a table in a grid, edit the grid and save it back.
"""

import tempfile
from pathlib import Path

from xml_table_editor import MemoryGrid, TableSession
from xml_table_editor.core import read_grid

SAMPLE_XML = """<database>
    <table name="People">
        <row>
            <cell name="Name">Ann</cell>
            <cell name="Age">30</cell>
        </row>
    </table>
    <table name="Cities">
        <row>
            <cell name="City">Oslo</cell>
        </row>
    </table>
</database>
"""


def example_table_editing(xml_path: Path) -> None:
    """Edit the People table through an in-memory grid."""
    session = TableSession()

    print(f"Tables: {session.open(xml_path)}")

    # Select a table and hand it to the grid
    snapshot = session.select_table("People")
    print(f"Headers: {snapshot.headers}")
    print(f"Rows: {snapshot.rows}")

    grid = MemoryGrid()
    session.populate_grid(grid, snapshot)

    # Edit the grid: change a cell and append a row
    grid.set_cell(0, 1, "31")
    new_row = grid.insert_row()
    grid.set_cell(new_row, 0, "Bob")
    grid.set_cell(new_row, 1, "25")
    print(f"Grid now holds: {read_grid(grid)}")

    # Nothing reaches the document until the grid is committed
    session.commit_from_grid(grid)
    session.save()

    # Reopen to check the file on disk
    reopened = TableSession()
    reopened.open(xml_path)
    print(f"Saved rows: {reopened.select_table('People').rows}")


def example_row_operations(xml_path: Path) -> None:
    """Add and delete rows directly in the document."""
    session = TableSession()
    session.open(xml_path)
    session.select_table("Cities")

    index = session.add_row(["Bergen"])
    print(f"Added row {index}")

    session.delete_row(0)
    print(f"Cities after delete: {session.discard_and_reload().rows}")

    session.save()
    print(xml_path.read_text())


def main() -> None:
    """Run all examples against a temporary file."""
    print("XML Table Editor Examples")
    print("=" * 50)

    with tempfile.TemporaryDirectory() as tmp_dir:
        xml_path = Path(tmp_dir) / "example.xml"
        xml_path.write_text(SAMPLE_XML)

        print("\n1. Grid editing:")
        example_table_editing(xml_path)

        print("\n2. Row operations:")
        example_row_operations(xml_path)


if __name__ == "__main__":
    main()
