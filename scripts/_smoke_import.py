import minimal_ultrasonic as mu

bench = mu.SimulatedGPIO()
sensor = mu.UltrasonicSensor(15, 14, gpio=bench)
print('Imported minimal_ultrasonic', mu.__version__)
print('Sensor:', sensor)
for unit in mu.Unit:
    print(f'  {unit.name}: {sensor.read(unit)}')
bench.set_echo(None, None)
print('No echo ->', sensor.read())
