from merge2048.cli import main

main()
