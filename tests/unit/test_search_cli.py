"""Tests for searchcli/search.py - CLI entry point."""
from __future__ import annotations

import argparse
import io
from unittest.mock import patch

import pytest

from product_search.model import ProductItem, ProductPrice


class TestCreateCliParser:
    """Tests for create_cli_parser function."""

    def test_creates_parser(self):
        """create_cli_parser returns ArgumentParser."""
        from searchcli.search import create_cli_parser

        parser = create_cli_parser()

        assert isinstance(parser, argparse.ArgumentParser)

    def test_query_words_collected(self):
        """Positional words are collected into a list."""
        from searchcli.search import create_cli_parser

        args = create_cli_parser().parse_args(["сир", "кисломолочний"])

        assert args.query == ["сир", "кисломолочний"]

    def test_defaults(self):
        """Options have sensible defaults."""
        from searchcli.search import create_cli_parser

        args = create_cli_parser().parse_args([])

        assert args.query == []
        assert args.page is None
        assert args.sort is None
        assert args.dry_run is False
        assert args.interactive is False
        assert args.price is None
        assert args.max_len is None
        assert args.config == "config.json"
        assert args.log_level == "WARNING"

    def test_page_is_int(self):
        """--page is parsed as an integer."""
        from searchcli.search import create_cli_parser

        args = create_cli_parser().parse_args(["milk", "--page", "2", "--sort", "price"])

        assert args.page == 2
        assert args.sort == "price"

    def test_max_len_is_int(self):
        """--max-len is parsed as an integer."""
        from searchcli.search import create_cli_parser

        args = create_cli_parser().parse_args(["milk", "--max-len", "50"])

        assert args.max_len == 50


class TestFormatResults:
    """Tests for format_results function."""

    def test_no_results(self):
        """Empty results print a notice."""
        from searchcli.search import format_results

        assert format_results([]) == "No products found."

    def test_lists_products_with_stores(self):
        """Each product is printed with its stores."""
        from searchcli.search import format_results

        text = format_results([ProductItem(name="Milk", available_stores=["atb", "silpo"]), ProductItem(name="Bread")])

        assert text == "Milk [atb, silpo]\nBread [-]"


class TestRunCli:
    """Tests for run_cli function."""

    def _args(self, *argv):
        from searchcli.search import create_cli_parser

        return create_cli_parser().parse_args(list(argv))

    def test_dry_run_prints_sanitized_query_and_url(self, config_file):
        """Dry run shows the request without sending it."""
        from searchcli.search import run_cli

        out = io.StringIO()
        with patch("product_search.products_api.make_request") as req:
            code = run_cli(self._args("milk'", "OR", "1=1;", "--dry-run", "--config", config_file), out)

        assert code == 0
        req.assert_not_called()
        assert out.getvalue() == "query: milk\nurl: https://shop.example.com/api/v1/products?q=milk\n"

    def test_dry_run_with_nothing_left(self, config_file):
        """A query that sanitizes to nothing has no URL."""
        from searchcli.search import run_cli

        out = io.StringIO()
        code = run_cli(self._args("select", "--dry-run", "--config", config_file), out)

        assert code == 0
        assert out.getvalue() == "query: \nurl: -\n"

    def test_search_prints_results(self, config_file):
        """A query runs a search and prints the results."""
        from searchcli.search import run_cli

        out = io.StringIO()
        with patch(
            "searchcli.search.search_products",
            return_value=[ProductItem(name="Milk", available_stores=["atb"])],
        ) as search:
            code = run_cli(self._args("milk", "--page", "2", "--config", config_file), out)

        assert code == 0
        search.assert_called_once_with("milk", page=2, sort=None, max_len=120)
        assert out.getvalue() == "Milk [atb]\n"

    def test_dry_run_max_len_truncates(self, config_file):
        """--max-len overrides the configured limit in dry run."""
        from searchcli.search import run_cli

        out = io.StringIO()
        code = run_cli(self._args("hello", "world", "--max-len", "5", "--dry-run", "--config", config_file), out)

        assert code == 0
        assert out.getvalue() == "query: hello\nurl: https://shop.example.com/api/v1/products?q=hello\n"

    def test_dry_run_max_len_zero(self, config_file):
        """--max-len 0 leaves nothing to send."""
        from searchcli.search import run_cli

        out = io.StringIO()
        code = run_cli(self._args("milk", "--max-len", "0", "--dry-run", "--config", config_file), out)

        assert code == 0
        assert out.getvalue() == "query: \nurl: -\n"

    def test_search_passes_max_len(self, config_file):
        """--max-len is passed through to the search."""
        from searchcli.search import run_cli

        out = io.StringIO()
        with patch("product_search.products_api.make_request", return_value=[]) as req:
            code = run_cli(self._args("hello", "world", "--max-len", "5", "--config", config_file), out)

        assert code == 0
        req.assert_called_once_with("/api/v1/products?q=hello")
        assert out.getvalue() == "No products found.\n"

    def test_missing_query(self, config_file):
        """Without a query the CLI exits with usage error code."""
        from searchcli.search import run_cli

        assert run_cli(self._args("--config", config_file), io.StringIO()) == 2

    def test_price_lookup(self, config_file):
        """--price prints the raw label and currency."""
        from searchcli.search import run_cli

        out = io.StringIO()
        with patch(
            "searchcli.search.get_product_price",
            return_value=ProductPrice(product_id="42", raw="99.00 грн", currency="UAH"),
        ):
            code = run_cli(self._args("--price", "42", "--config", config_file), out)

        assert code == 0
        assert out.getvalue() == "99.00 грн (UAH)\n"

    def test_price_lookup_failure(self, config_file):
        """A failed price lookup exits with 1."""
        from searchcli.search import run_cli

        with patch("searchcli.search.get_product_price", return_value=None):
            assert run_cli(self._args("--price", "42", "--config", config_file), io.StringIO()) == 1


class TestRunInteractive:
    """Tests for run_interactive function."""

    def test_lines_are_searched_and_empty_line_clears(self, mock_config):
        """Each line is searched; an empty line clears immediately."""
        from searchcli.search import run_interactive

        out = io.StringIO()
        with patch("searchcli.session.get_debounce_seconds", return_value=10), patch(
            "product_search.products_api.make_request",
            return_value=[{"name": "Bread", "available_stores": ["atb"]}],
        ) as req:
            run_interactive(io.StringIO("milk\n\nbread\n"), out)

        req.assert_called_once_with("/api/v1/products?q=bread")
        assert out.getvalue() == "(cleared)\nBread [atb]\n"


class TestMain:
    """Tests for main function."""

    def test_exits_with_run_cli_code(self, config_file, capsys):
        """main exits with the code returned by run_cli."""
        from searchcli.search import main

        with pytest.raises(SystemExit) as exc:
            main(["milk", "--dry-run", "--config", config_file])

        assert exc.value.code == 0
        assert "query: milk" in capsys.readouterr().out

    def test_unexpected_error_exits_1(self, config_file, capsys):
        """Unexpected exceptions are reported and exit with 1."""
        from searchcli.search import main

        with patch("searchcli.search.run_cli", side_effect=RuntimeError("boom")):
            with pytest.raises(SystemExit) as exc:
                main(["milk", "--config", config_file])

        assert exc.value.code == 1
        assert "Error: boom" in capsys.readouterr().out
