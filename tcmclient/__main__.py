from tcmclient.cli.main import main

main()
