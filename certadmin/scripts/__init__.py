# One-off maintenance scripts, run with `python -m certadmin.scripts.<name>`.
