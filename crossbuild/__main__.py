from crossbuild.cli import run

run()
