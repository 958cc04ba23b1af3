from lambda_mcp.cli.main import main


main()
