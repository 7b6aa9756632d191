from nodotfs.cli.serve import main

main()
