from validly.cli import main

main()
