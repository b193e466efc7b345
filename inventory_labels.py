#!/usr/bin/env python3

"""
Generate printable inventory label sheets from a JSON batch.
"""

# local repo modules
import inventory_label_engine.cli


if __name__ == "__main__":
	inventory_label_engine.cli.main()
