from makepick.cli.main import main

main()
