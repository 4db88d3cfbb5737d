"""
So that `python -m rexpr "1 + 2"` works the same as the `rexpr` command.
"""
from .cmdline import main

main()
