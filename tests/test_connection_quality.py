from nimbleserver.connection_quality import ConnectionQuality, DisconnectReason


def test_fresh_quality_is_kept():
    quality = ConnectionQuality()
    assert quality.evaluate() is DisconnectReason.KEEP
    assert not quality.should_disconnect()
    assert quality.describe() == "connection should be kept"


def test_before_first_step_threshold_is_lenient():
    quality = ConnectionQuality()
    quality.added_forced_steps(199)
    assert not quality.should_disconnect()
    quality.added_forced_steps(1)
    assert quality.should_disconnect()
    assert quality.evaluate() is DisconnectReason.NOT_PROVIDING_STEPS_IN_TIME


def test_after_first_step_threshold_is_strict():
    quality = ConnectionQuality()
    quality.provided_usable_step()
    quality.added_forced_steps(19)
    assert not quality.should_disconnect()
    quality.added_forced_steps(1)
    assert quality.should_disconnect()
    assert quality.describe() == (
        "not receiving steps from client in time. 20 forced steps in a row"
    )


def test_usable_step_clears_forced_counter():
    quality = ConnectionQuality()
    quality.added_forced_steps(5)
    quality.provided_usable_step()
    assert quality.forced_step_in_row_counter == 0
    assert quality.provided_steps_in_a_row == 1
    assert quality.has_added_first_accepted_steps


def test_forced_steps_clear_provided_counter():
    quality = ConnectionQuality()
    quality.provided_usable_step()
    quality.provided_usable_step()
    quality.added_forced_steps(3)
    assert quality.provided_steps_in_a_row == 0
    assert quality.forced_step_in_row_counter == 3


def test_added_steps_accumulate_and_reset_on_usable_step():
    quality = ConnectionQuality()
    quality.added_steps_to_buffer(3)
    quality.added_steps_to_buffer(4)
    assert quality.added_steps_to_buffer_counter == 7
    quality.provided_usable_step()
    assert quality.added_steps_to_buffer_counter == 0


def test_reset_restores_initial_state():
    quality = ConnectionQuality()
    quality.provided_usable_step()
    quality.added_forced_steps(25)
    quality.added_steps_to_buffer(2)
    quality.reset()
    assert quality == ConnectionQuality()