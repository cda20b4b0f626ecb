from certadmin.core.toast import ToastDispatcher
from certadmin.services.toast_center import ToastCenter


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_center():
    clock = FakeClock()
    dispatcher = ToastDispatcher()
    center = ToastCenter(dispatcher, clock=clock)
    center.activate()
    return dispatcher, center, clock


class TestActivation:
    def test_should_register_on_activate(self):
        dispatcher, center, _ = make_center()

        assert center.is_registered
        record = dispatcher.success("Guardado")
        assert center.active() == [record]

    def test_should_reregister_after_being_replaced(self):
        dispatcher, center, _ = make_center()
        other = []
        dispatcher.set_subscriber(other.append)

        assert not center.is_registered
        dispatcher.info("a otro")
        assert center.active() == []

        center.activate()
        dispatcher.info("de vuelta")
        assert [r.message for r in center.active()] == ["de vuelta"]
        assert [r.message for r in other] == ["a otro"]


class TestClose:
    def test_should_remove_exactly_one_and_keep_order(self):
        dispatcher, center, _ = make_center()
        first = dispatcher.info("uno")
        second = dispatcher.info("dos")
        third = dispatcher.info("tres")

        assert center.close(second.id) is True

        assert center.active() == [first, third]

    def test_should_return_false_for_unknown_id(self):
        dispatcher, center, _ = make_center()
        dispatcher.info("uno")

        assert center.close("missing") is False
        assert len(center.active()) == 1


class TestExpiry:
    def test_should_expire_each_record_on_its_own_duration(self):
        dispatcher, center, clock = make_center()
        short = dispatcher.info("corto", duration_ms=1000)
        clock.advance(0.5)
        long = dispatcher.info("largo", duration_ms=3000)

        clock.advance(0.4)
        assert center.active() == [short, long]

        clock.advance(0.2)
        assert center.active() == [long]

        clock.advance(3.0)
        assert center.active() == []

    def test_clear_should_empty_the_queue(self):
        dispatcher, center, _ = make_center()
        dispatcher.info("uno")

        center.clear()

        assert center.active() == []

    def test_should_drop_expired_records_when_new_ones_arrive(self):
        dispatcher, center, clock = make_center()

        for i in range(5000):
            dispatcher.info(f"cambio {i}", duration_ms=10)
            clock.advance(1.0)

        # Nothing ever read the queue, yet only the latest record is retained
        assert len(center) <= 1
        dispatcher.info("último", duration_ms=10)
        assert len(center) == 1
