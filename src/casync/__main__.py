from casync.cli.main import main

main()
