from promcheck.main import main

main()
