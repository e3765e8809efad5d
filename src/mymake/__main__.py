from mymake.cli import cli

cli(prog_name="mymake")
