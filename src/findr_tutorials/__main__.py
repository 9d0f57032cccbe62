from findr_tutorials.cli import main

main()
