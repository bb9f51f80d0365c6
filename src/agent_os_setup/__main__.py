from agent_os_setup import main

main()
