from infection_sim.experiments.cli import main

main()
