from service_sutra.app.main import main

main()
