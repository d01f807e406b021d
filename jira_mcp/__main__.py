from jira_mcp.cli import main

main()
