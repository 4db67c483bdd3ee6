from desk.console import main

main()
