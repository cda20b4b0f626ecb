# Core settings, Firebase bootstrap, auth dependencies and error handling.
