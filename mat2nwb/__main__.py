from mat2nwb.cli import run

run()
