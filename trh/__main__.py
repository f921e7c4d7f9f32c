from trh.cli.app import main

main()
