from gplay.cli.app import main

main()
