"""
LC-3 VM Command-Line Tools
==========================

- **lc3run**: load a binary program image at $3000 and execute it,
  printing an instruction-level trace.
"""
