"""Tests for the in-memory grid and grid helpers."""

import pytest

from xml_table_editor.core import MemoryGrid, TableGrid, TableSnapshot, fill_grid, read_grid


class TestMemoryGrid:
    """Tests for MemoryGrid."""

    def test_is_a_table_grid(self):
        assert isinstance(MemoryGrid(), TableGrid)

    def test_row_count_grows_with_empty_cells(self):
        """Test new rows start empty."""
        grid = MemoryGrid()
        grid.set_columns(["A", "B"])
        grid.set_row_count(2)

        assert grid.row_count() == 2
        assert grid.column_count() == 2
        assert grid.get_cell(1, 1) == ""

    def test_row_count_shrinks(self):
        grid = MemoryGrid()
        grid.set_columns(["A"])
        grid.set_row_count(3)
        grid.set_cell(0, 0, "keep")
        grid.set_row_count(1)

        assert read_grid(grid) == [["keep"]]

    def test_negative_row_count_rejected(self):
        with pytest.raises(ValueError):
            MemoryGrid().set_row_count(-1)

    def test_set_columns_clears_cells(self):
        """Test replacing headers resets every cell."""
        grid = MemoryGrid()
        grid.set_columns(["A"])
        grid.set_row_count(1)
        grid.set_cell(0, 0, "x")
        grid.set_columns(["A", "B"])

        assert read_grid(grid) == [["", ""]]

    def test_insert_and_remove_rows(self):
        """Test the shell's row helpers."""
        grid = MemoryGrid()
        grid.set_columns(["A"])
        grid.set_row_count(1)
        grid.set_cell(0, 0, "first")

        assert grid.insert_row() == 1
        assert grid.insert_row(0) == 0
        assert read_grid(grid) == [[""], ["first"], [""]]

        grid.remove_row(0)
        assert read_grid(grid) == [["first"], [""]]

        with pytest.raises(IndexError):
            grid.remove_row(5)

    def test_out_of_range_cells(self):
        grid = MemoryGrid()
        grid.set_columns(["A"])
        grid.set_row_count(1)

        with pytest.raises(IndexError):
            grid.get_cell(1, 0)
        with pytest.raises(IndexError):
            grid.set_cell(0, 1, "x")


class TestFillAndRead:
    """Tests for fill_grid and read_grid."""

    def test_fill_matches_cells_to_headers(self):
        """Test extra cells are dropped and missing cells are empty."""
        snapshot = TableSnapshot(
            name="T",
            headers=["Col1", "Col2"],
            rows=[["a", "b", "extra"], ["c"]],
        )
        grid = MemoryGrid()
        fill_grid(grid, snapshot)

        assert grid.headers() == ["Col1", "Col2"]
        assert read_grid(grid) == [["a", "b"], ["c", ""]]

    def test_fill_table_without_columns(self):
        """Test a header-less snapshot gives rows without cells."""
        grid = MemoryGrid()
        fill_grid(grid, TableSnapshot(name="Empty", headers=[], rows=[[]]))

        assert grid.column_count() == 0
        assert read_grid(grid) == [[]]
