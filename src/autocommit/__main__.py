"""
Allow ``python -m autocommit`` as an equivalent of the ``autocommit``
console script.
"""

from autocommit.cli import main


if __name__ == "__main__":
    main(prog_name="autocommit")
